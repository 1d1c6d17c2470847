"""SQLAlchemy ORM models for the identity bounded context.

These models map to database tables and are used by repository implementations.
"""

from identity.infrastructure.models.api_key import APIKeyModel
from identity.infrastructure.models.user import (
    USERS_EMAIL_CONSTRAINT,
    USERS_FEDERATED_ID_CONSTRAINT,
    UserModel,
)

__all__ = [
    "APIKeyModel",
    "USERS_EMAIL_CONSTRAINT",
    "USERS_FEDERATED_ID_CONSTRAINT",
    "UserModel",
]
