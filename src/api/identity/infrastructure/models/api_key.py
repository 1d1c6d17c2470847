"""SQLAlchemy ORM model for the api_keys table.

The key_digest is the only sensitive data stored - the plaintext secret
is never persisted.
"""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class APIKeyModel(Base, TimestampMixin):
    """ORM model for api_keys table.

    Notes:
    - key_digest is the hex SHA-256 of the secret, unique for exact lookup
    - prefix allows key identification without exposing the full key
    - owner_id references users.id with CASCADE delete, so deleting an
      account removes its keys
    """

    __tablename__ = "api_keys"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key_digest: Mapped[str] = mapped_column(String(64), nullable=False)
    prefix: Mapped[str] = mapped_column(String(12), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("key_digest", name="uq_api_keys_key_digest"),
    )

    def __repr__(self) -> str:
        return (
            f"<APIKeyModel(id={self.id}, owner_id={self.owner_id}, "
            f"prefix={self.prefix})>"
        )
