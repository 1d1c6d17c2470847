"""Observation context for domain-oriented observability.

Observation contexts collect request-scoped metadata that probes attach to
every event they emit.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        principal_id: Identifier of the principal performing the operation.
        auth_strategy: Authentication strategy that resolved the principal.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", principal_id="01HX...")
        probe = DefaultAPIKeyServiceProbe().with_context(context)
    """

    request_id: str | None = None
    principal_id: str | None = None
    auth_strategy: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.principal_id is not None:
            result["principal_id"] = self.principal_id
        if self.auth_strategy is not None:
            result["auth_strategy"] = self.auth_strategy
        result.update(self.extra)
        return result
