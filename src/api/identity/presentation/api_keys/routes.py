"""HTTP routes for API key management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from identity.application.services import APIKeyService
from identity.dependencies.api_key import get_api_key_service
from identity.dependencies.authentication import require_roles
from identity.domain.aggregates import User
from identity.domain.value_objects import Role
from identity.ports.exceptions import IdentityError
from identity.presentation.api_keys.models import (
    APIKeyCreatedResponse,
    APIKeyDeletedResponse,
    APIKeyResponse,
)
from identity.presentation.errors import to_http_exception

router = APIRouter(
    prefix="/api-keys",
    tags=["api-keys"],
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_api_key(
    principal: Annotated[User, Depends(require_roles(Role.USER))],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> APIKeyCreatedResponse:
    """Create a new API key for the caller.

    The plaintext secret is returned ONLY in this response.
    """
    try:
        api_key, plaintext_secret = await service.issue(principal)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return APIKeyCreatedResponse(
        secret=plaintext_secret,
        **APIKeyResponse.from_domain(api_key).model_dump(),
    )


@router.get("")
async def list_api_keys(
    principal: Annotated[User, Depends(require_roles(Role.USER))],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> list[APIKeyResponse]:
    """List the caller's API keys. Secrets are never returned here."""
    try:
        api_keys = await service.list_keys(principal)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return [APIKeyResponse.from_domain(key) for key in api_keys]


@router.delete("/{api_key_id}")
async def delete_api_key(
    api_key_id: str,
    principal: Annotated[User, Depends(require_roles(Role.USER))],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> APIKeyDeletedResponse:
    """Delete one of the caller's API keys.

    Raises:
        HTTPException: 404 if the key does not exist or belongs to someone else
    """
    try:
        message = await service.revoke(principal, api_key_id)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return APIKeyDeletedResponse(message=message)
