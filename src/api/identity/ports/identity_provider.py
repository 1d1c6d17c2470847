"""Port for the external identity provider's administrative API.

The provider is the service of record for federated accounts. The
application only needs a narrow slice of its API, described by
``IIdentityProvider``; the HTTP implementation lives in infrastructure and
tests substitute an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# Only this many listed addresses are considered when the primary is unset
EMAIL_CANDIDATE_LIMIT = 3


class IdentityProviderError(Exception):
    """Raised when the provider cannot be reached or answers with an error.

    Carries the HTTP status when there was a response.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RemoteIdentity:
    """A user account as known to the identity provider."""

    id: str
    email_addresses: tuple[str, ...] = ()
    primary_email_address: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    external_id: str | None = None
    created_at: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def email(self) -> str | None:
        """The address used for the local shadow record.

        First non-empty of the primary address and the first few listed
        addresses, or None when the identity has no usable address.
        """
        candidates = (
            self.primary_email_address,
            *self.email_addresses[:EMAIL_CANDIDATE_LIMIT],
        )
        for candidate in candidates:
            if candidate and candidate.strip():
                return candidate
        return None


@dataclass(frozen=True)
class RemoteIdentityDraft:
    """Fields for creating a remote identity."""

    email_addresses: tuple[str, ...]
    password: str
    first_name: str
    last_name: str
    username: str | None = None
    external_id: str | None = None


@dataclass(frozen=True)
class RemoteIdentityChanges:
    """Partial update of a remote identity; ``None`` leaves a field alone."""

    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    public_metadata: dict[str, Any] | None = None
    private_metadata: dict[str, Any] | None = None

    def as_payload(self) -> dict[str, Any]:
        """Provider request body containing only the fields being changed."""
        payload = {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
            "public_metadata": self.public_metadata,
            "private_metadata": self.private_metadata,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class RemoteUserQuery:
    """Paging parameters for listing remote identities."""

    limit: int = 10
    offset: int = 0
    order_by: str | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.limit <= 500:
            raise ValueError("limit must be between 1 and 500")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")


@runtime_checkable
class IIdentityProvider(Protocol):
    """Administrative operations against the identity provider.

    All methods raise ``IdentityProviderError`` on transport failures and
    unexpected responses. None of them retry.
    """

    async def get_user(self, remote_id: str) -> RemoteIdentity | None:
        """Fetch a remote identity, or None if the provider does not know it."""
        ...

    async def list_users(self, query: RemoteUserQuery) -> list[RemoteIdentity]:
        """List remote identities."""
        ...

    async def create_user(self, draft: RemoteIdentityDraft) -> RemoteIdentity:
        """Create a remote identity."""
        ...

    async def update_user(
        self, remote_id: str, changes: RemoteIdentityChanges
    ) -> RemoteIdentity | None:
        """Update a remote identity; None if it does not exist."""
        ...

    async def delete_user(self, remote_id: str) -> bool:
        """Delete a remote identity; False if it did not exist."""
        ...
