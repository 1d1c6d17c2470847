"""SQLAlchemy ORM model for the users table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, validates

from identity.domain.value_objects import normalize_email
from infrastructure.database.models import Base, TimestampMixin

USERS_EMAIL_CONSTRAINT = "uq_users_email"
USERS_FEDERATED_ID_CONSTRAINT = "uq_users_federated_id"


class UserModel(Base, TimestampMixin):
    """ORM model for users table.

    Notes:
    - id is VARCHAR(26) for ULID format
    - email is stored normalised; the validator below applies on every
      assignment, so inserts and updates through the ORM agree with lookups
    - federated_id is NULL for password-only accounts; the unique constraint
      allows any number of NULLs
    - rows with deleted_at set are treated as absent by the repository
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    federated_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    roles: Mapped[list[str]] = mapped_column(
        ARRAY(String(32)), nullable=False, default=lambda: ["user"]
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("email", name=USERS_EMAIL_CONSTRAINT),
        UniqueConstraint("federated_id", name=USERS_FEDERATED_ID_CONSTRAINT),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"
