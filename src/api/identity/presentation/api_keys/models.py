"""Pydantic models for API key requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from identity.domain.aggregates import APIKey


class APIKeyResponse(BaseModel):
    """Response model for an API key (without secret).

    The owner association is deliberately not exposed.
    """

    id: str = Field(..., description="API Key ID (ULID format)")
    prefix: str = Field(
        ..., description="Key prefix for identification (e.g., pcls_abc123)"
    )
    is_active: bool = Field(..., description="Whether the key can authenticate")
    created_at: datetime | None = Field(None, description="When the key was created")

    @classmethod
    def from_domain(cls, api_key: APIKey) -> APIKeyResponse:
        return cls(
            id=api_key.id.value,
            prefix=api_key.prefix,
            is_active=api_key.is_active,
            created_at=api_key.created_at,
        )


class APIKeyCreatedResponse(APIKeyResponse):
    """Response model for a newly created API key (includes secret).

    The secret is returned ONLY in this response at creation time.
    """

    secret: str = Field(
        ...,
        description="The API key secret. SAVE THIS - it cannot be retrieved again.",
    )


class APIKeyDeletedResponse(BaseModel):
    message: str = Field(..., description="Confirmation message")
