"""User aggregate for the identity context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from identity.domain.value_objects import (
    DEFAULT_ROLES,
    Profile,
    Role,
    UserId,
    normalize_email,
)


def _dedupe_roles(roles: Iterable[Role | str]) -> tuple[Role, ...]:
    seen: list[Role] = []
    for role in roles:
        role = Role(role)
        if role not in seen:
            seen.append(role)
    return tuple(seen)


@dataclass
class User:
    """A local account, authenticated by password, API key or federation.

    Business rules:
    - email is stored in canonical form (see ``normalize_email``)
    - roles behave as an ordered set; duplicates are dropped
    - an account with neither password_hash nor federated_id cannot log in
      by password or federation, but is otherwise valid
    """

    id: UserId
    email: str
    user_name: str = ""
    first_name: str = ""
    last_name: str = ""
    password_hash: str | None = None
    federated_id: str | None = None
    is_active: bool = True
    roles: tuple[Role, ...] = DEFAULT_ROLES
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.email = normalize_email(self.email)
        self.roles = _dedupe_roles(self.roles)

    @classmethod
    def register(cls, email: str, password_hash: str, profile: Profile) -> User:
        """Factory for a password account with the default roles."""
        return cls(
            id=UserId.generate(),
            email=email,
            user_name=profile.user_name,
            first_name=profile.first_name,
            last_name=profile.last_name,
            password_hash=password_hash,
        )

    @classmethod
    def provision_federated(
        cls, federated_id: str, email: str, profile: Profile
    ) -> User:
        """Factory for the local shadow record of a federated identity.

        Raises:
            ValueError: If the remote identity has no usable email address
        """
        if not email.strip():
            raise ValueError(f"Federated identity {federated_id} has no email")

        return cls(
            id=UserId.generate(),
            email=email,
            user_name=profile.user_name,
            first_name=profile.first_name,
            last_name=profile.last_name,
            federated_id=federated_id,
        )

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def has_any_role(self, required: Iterable[Role | str]) -> bool:
        """True if the user holds at least one of ``required``."""
        return any(Role(role) in self.roles for role in required)

    def update_profile(
        self,
        email: str | None = None,
        user_name: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> None:
        """Apply the given profile changes; ``None`` leaves a field alone."""
        if email is not None:
            self.email = normalize_email(email)
        if user_name is not None:
            self.user_name = user_name
        if first_name is not None:
            self.first_name = first_name
        if last_name is not None:
            self.last_name = last_name
        self.updated_at = datetime.now(UTC)

    def __str__(self) -> str:
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
