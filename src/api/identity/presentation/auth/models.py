"""Pydantic models for account, login and session requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from identity.application.value_objects import SessionGrant
from identity.domain.aggregates import User


class RegisterRequest(BaseModel):
    """Request model for creating a password account."""

    email: str = Field(..., description="Email address", min_length=1, max_length=255)
    password: str = Field(
        ..., description="Plaintext password", min_length=1, max_length=128
    )
    user_name: str = Field("", description="Display user name", max_length=255)
    first_name: str = Field("", description="First name", max_length=255)
    last_name: str = Field("", description="Last name", max_length=255)


class RegisterResponse(BaseModel):
    """Confirmation of a new account. Only the id is disclosed."""

    message: str = Field(..., description="Confirmation message")
    id: str = Field(..., description="User ID (ULID format)")


class UserResponse(BaseModel):
    """Public view of an account. Never includes credential material."""

    id: str = Field(..., description="User ID (ULID format)")
    email: str = Field(..., description="Normalized email address")
    user_name: str = Field(..., description="Display user name")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    is_active: bool = Field(..., description="Whether the account may authenticate")
    roles: list[str] = Field(..., description="Role tags held by the account")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        return cls(
            id=user.id.value,
            email=user.email,
            user_name=user.user_name,
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
            roles=[role.value for role in user.roles],
        )


class SessionResponse(UserResponse):
    """Account view plus a freshly issued session token."""

    token: str = Field(..., description="Session token for the Bearer scheme")
    expires_at: datetime = Field(..., description="When the token expires")

    @classmethod
    def from_grant(cls, grant: SessionGrant) -> SessionResponse:
        return cls(
            token=grant.access_token,
            expires_at=grant.expires_at,
            **UserResponse.from_domain(grant.principal).model_dump(),
        )


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    email: str | None = Field(None, min_length=1, max_length=255)
    user_name: str | None = Field(None, max_length=255)
    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
