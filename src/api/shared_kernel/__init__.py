"""Components shared by the identity and products contexts.

Holds the token primitives (federated JWT validation, session tokens) and
the observation context carried by probes. Nothing here may import a
bounded context.
"""
