"""Value objects for the identity domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class APIKeyId:
    """Identifier for an APIKey aggregate."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> APIKeyId:
        """Generate a new APIKeyId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> APIKeyId:
        """Create APIKeyId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid APIKeyId: {value}") from e

        return cls(value=value)


class Role(StrEnum):
    """Role tags a user can hold."""

    USER = "user"
    ADMIN = "admin"


DEFAULT_ROLES: tuple[Role, ...] = (Role.USER,)


def normalize_email(email: str) -> str:
    """Canonical form of an email address: trimmed and lower-cased."""
    return email.strip().lower()


@dataclass(frozen=True)
class Profile:
    """Descriptive fields of a user account."""

    user_name: str = ""
    first_name: str = ""
    last_name: str = ""
