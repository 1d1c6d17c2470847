"""Repository protocols (ports) for the identity bounded context.

Repositories persist and reconstitute aggregates. They never open or
commit transactions: the calling service wraps each unit of work in
``async with session.begin()``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import APIKey, User
from identity.domain.value_objects import APIKeyId, UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Soft-deleted users are invisible to every lookup.
    """

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by ID, or None."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by email.

        The email is normalised before comparison.
        """
        ...

    async def get_by_federated_id(self, federated_id: str) -> User | None:
        """Retrieve the shadow record of a federated identity, or None."""
        ...

    async def list_users(self, limit: int = 50, offset: int = 0) -> list[User]:
        """List users ordered by creation time."""
        ...

    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
            DuplicateFederatedIdError: If the federated id is already linked
        """
        ...

    async def save(self, user: User) -> None:
        """Update an existing user.

        Raises:
            EmailAlreadyRegisteredError: If the new email is taken
        """
        ...

    async def delete(self, user: User) -> bool:
        """Hard delete a user (API keys cascade).

        Returns:
            True if a row was deleted
        """
        ...


@runtime_checkable
class IAPIKeyRepository(Protocol):
    """Repository for APIKey aggregate persistence.

    Every lookup by key id includes the owner id in its predicate, so a key
    owned by someone else is indistinguishable from a missing one.
    """

    async def add(self, api_key: APIKey) -> None:
        """Insert a new API key."""
        ...

    async def list_by_owner(self, owner_id: UserId) -> list[APIKey]:
        """List the keys owned by ``owner_id``, oldest first."""
        ...

    async def get_by_id(self, api_key_id: APIKeyId, owner_id: UserId) -> APIKey | None:
        """Retrieve a key by ID if it is owned by ``owner_id``."""
        ...

    async def get_with_owner_by_digest(
        self, key_digest: str
    ) -> tuple[APIKey, User] | None:
        """Retrieve a key and its owner by exact digest match."""
        ...

    async def delete(self, api_key_id: APIKeyId, owner_id: UserId) -> int:
        """Delete a key owned by ``owner_id``.

        Returns:
            Number of rows deleted
        """
        ...
