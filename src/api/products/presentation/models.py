"""Pydantic models for the product placeholder routes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ProductRequest(BaseModel):
    """Free-form product payload; not persisted."""

    name: str | None = Field(None, max_length=255)
    attributes: dict[str, Any] = Field(default_factory=dict)


class ProductCreatedResponse(BaseModel):
    message: str = Field(..., description="Acknowledgement")
    user_id: str = Field(..., description="ID of the principal that made the call")


class ProductAcknowledgement(BaseModel):
    message: str = Field(..., description="Acknowledgement")
