"""APIKey aggregate for the identity context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from identity.domain.value_objects import APIKeyId, UserId


@dataclass
class APIKey:
    """A long-lived opaque credential owned by a user.

    Only the SHA-256 digest of the secret is kept; the plaintext is shown
    to the owner once, at creation.

    Business rules:
    - A key authenticates only while it and its owner are both active
    - Keys are deleted individually and only by their owner
    """

    id: APIKeyId
    owner_id: UserId
    key_digest: str
    prefix: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(cls, owner_id: UserId, key_digest: str, prefix: str) -> APIKey:
        """Factory method for a new key owned by ``owner_id``."""
        now = datetime.now(UTC)
        return cls(
            id=APIKeyId.generate(),
            owner_id=owner_id,
            key_digest=key_digest,
            prefix=prefix,
            created_at=now,
            updated_at=now,
        )

    def is_usable_by(self, owner_is_active: bool) -> bool:
        """Whether the key may authenticate its owner right now."""
        return self.is_active and owner_is_active
