"""HTTP routes for administering identities at the identity provider.

Every route requires the ``admin`` role.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from identity.application.services import FederatedIdentityService
from identity.dependencies.authentication import require_roles
from identity.dependencies.federated import get_federated_identity_service
from identity.domain.value_objects import Role
from identity.ports.exceptions import IdentityError
from identity.ports.identity_provider import RemoteUserQuery
from identity.presentation.errors import to_http_exception
from identity.presentation.federated_users.models import (
    CreateFederatedUserRequest,
    FederatedUserCreatedResponse,
    FederatedUserResponse,
    UpdateFederatedUserRequest,
)

router = APIRouter(
    prefix="/federated-users",
    tags=["federated-users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.get("")
async def list_federated_users(
    service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
    limit: Annotated[int, Query(ge=1, le=500)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
    order_by: str | None = None,
) -> list[FederatedUserResponse]:
    try:
        remotes = await service.list_remote_users(
            RemoteUserQuery(limit=limit, offset=offset, order_by=order_by)
        )
    except IdentityError as e:
        raise to_http_exception(e) from e
    return [FederatedUserResponse.from_remote(remote) for remote in remotes]


@router.get("/{remote_id}")
async def get_federated_user(
    remote_id: str,
    service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
) -> FederatedUserResponse:
    try:
        remote = await service.get_remote_user(remote_id)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return FederatedUserResponse.from_remote(remote)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_federated_user(
    request: CreateFederatedUserRequest,
    service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
) -> FederatedUserCreatedResponse:
    """Create an identity at the provider and its local account.

    Raises:
        HTTPException: 409 if the email is already registered locally
    """
    try:
        remote, user = await service.create_remote_user(request.to_draft())
    except IdentityError as e:
        raise to_http_exception(e) from e
    return FederatedUserCreatedResponse.from_pair(remote, user)


@router.patch("/{remote_id}")
async def update_federated_user(
    remote_id: str,
    request: UpdateFederatedUserRequest,
    service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
) -> FederatedUserResponse:
    try:
        remote = await service.update_remote_user(remote_id, request.to_changes())
    except IdentityError as e:
        raise to_http_exception(e) from e
    return FederatedUserResponse.from_remote(remote)


@router.delete("/{remote_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_federated_user(
    remote_id: str,
    service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
) -> None:
    try:
        await service.delete_remote_user(remote_id)
    except IdentityError as e:
        raise to_http_exception(e) from e
