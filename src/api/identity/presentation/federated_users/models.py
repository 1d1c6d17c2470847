"""Pydantic models for administering identities at the identity provider."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from identity.domain.aggregates import User
from identity.ports.identity_provider import (
    RemoteIdentity,
    RemoteIdentityChanges,
    RemoteIdentityDraft,
)


class CreateFederatedUserRequest(BaseModel):
    """Request model for creating an identity at the provider."""

    email_addresses: list[str] = Field(
        ..., description="Email addresses; the first is used locally", min_length=1
    )
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    username: str | None = Field(None, min_length=3, max_length=50)
    external_id: str | None = Field(None, description="ID in an external system")

    def to_draft(self) -> RemoteIdentityDraft:
        return RemoteIdentityDraft(
            email_addresses=tuple(self.email_addresses),
            password=self.password,
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            external_id=self.external_id,
        )


class UpdateFederatedUserRequest(BaseModel):
    """Partial update; omitted fields are left unchanged at the provider."""

    first_name: str | None = Field(None, min_length=2, max_length=50)
    last_name: str | None = Field(None, min_length=2, max_length=50)
    username: str | None = Field(None, min_length=3, max_length=50)
    public_metadata: dict[str, Any] | None = None
    private_metadata: dict[str, Any] | None = None

    def to_changes(self) -> RemoteIdentityChanges:
        return RemoteIdentityChanges(
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            public_metadata=self.public_metadata,
            private_metadata=self.private_metadata,
        )


class FederatedUserResponse(BaseModel):
    """An identity as reported by the provider."""

    id: str = Field(..., description="Provider user ID")
    email: str | None = Field(None, description="Address used for the local account")
    email_addresses: list[str] = Field(default_factory=list)
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    external_id: str | None = None
    created_at: int | None = Field(None, description="Provider creation timestamp (ms)")

    @classmethod
    def from_remote(cls, remote: RemoteIdentity) -> FederatedUserResponse:
        return cls(
            id=remote.id,
            email=remote.email,
            email_addresses=list(remote.email_addresses),
            username=remote.username,
            first_name=remote.first_name,
            last_name=remote.last_name,
            external_id=remote.external_id,
            created_at=remote.created_at,
        )


class FederatedUserCreatedResponse(FederatedUserResponse):
    """Provider identity plus the id of its local shadow account."""

    local_user_id: str = Field(..., description="Local user ID (ULID format)")

    @classmethod
    def from_pair(
        cls, remote: RemoteIdentity, user: User
    ) -> FederatedUserCreatedResponse:
        return cls(
            local_user_id=user.id.value,
            **FederatedUserResponse.from_remote(remote).model_dump(),
        )
