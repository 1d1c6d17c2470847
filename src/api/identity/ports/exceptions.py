"""Domain exceptions for the identity bounded context.

Every error a caller may see derives from ``IdentityError`` through one of
six kinds (bad request, unauthorized, forbidden, not found, conflict,
internal). The presentation layer maps kinds to HTTP status codes; the
message of an ``IdentityError`` is safe to show to the caller.
"""

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INTERNAL_ERROR_MESSAGE = "Unexpected error, check server logs"


class IdentityError(Exception):
    """Base class for errors surfaced to callers of identity operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(IdentityError):
    """Raised when required input is missing or malformed."""

    pass


class UnauthorizedError(IdentityError):
    """Raised when a credential is missing, invalid, expired or its principal inactive."""

    pass


class ForbiddenError(IdentityError):
    """Raised when an authenticated principal lacks every required role."""

    pass


class NotFoundError(IdentityError):
    """Raised when a resource does not exist or is not owned by the caller."""

    pass


class ConflictError(IdentityError):
    """Raised when a uniqueness rule would be violated."""

    pass


class InternalError(IdentityError):
    """Raised for store or provider failures not attributable to the caller."""

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)


class InvalidCredentialsError(UnauthorizedError):
    """Raised for any failed authentication attempt.

    The message is always the same so that a caller cannot tell which
    factor was wrong or whether the account exists.
    """

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when an email is already used by another account."""

    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered")
        self.email = email


class DuplicateFederatedIdError(ConflictError):
    """Raised when a shadow record for a federated identity already exists.

    Seen by the loser of two concurrent first logins of the same identity.
    """

    def __init__(self, federated_id: str):
        super().__init__("Federated identity is already linked")
        self.federated_id = federated_id


class UserNotFoundError(NotFoundError):
    """Raised when a local user cannot be found."""

    def __init__(self) -> None:
        super().__init__("User not found")


class APIKeyNotFoundError(NotFoundError):
    """Raised when an API key does not exist or belongs to someone else."""

    def __init__(self) -> None:
        super().__init__("API key not found")


class RemoteUserNotFoundError(NotFoundError):
    """Raised when the identity provider does not know a user id."""

    def __init__(self, remote_id: str):
        super().__init__(f"Federated user {remote_id} not found")
        self.remote_id = remote_id
