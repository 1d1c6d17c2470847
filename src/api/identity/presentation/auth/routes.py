"""HTTP routes for password accounts, sessions and profiles."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from identity.application.services import PasswordAuthService, UserService
from identity.dependencies.authentication import get_current_principal, require_roles
from identity.dependencies.user import get_password_auth_service, get_user_service
from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, Role
from identity.ports.exceptions import IdentityError
from identity.presentation.auth.models import (
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    UpdateProfileRequest,
    UserResponse,
)
from identity.presentation.errors import to_http_exception

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    service: Annotated[PasswordAuthService, Depends(get_password_auth_service)],
) -> RegisterResponse:
    """Create a password account with the default ``user`` role.

    Raises:
        HTTPException: 400 if email or password is blank
        HTTPException: 409 if the email is already registered
    """
    try:
        user = await service.register(
            email=request.email,
            password=request.password,
            profile=Profile(
                user_name=request.user_name,
                first_name=request.first_name,
                last_name=request.last_name,
            ),
        )
    except IdentityError as e:
        raise to_http_exception(e) from e
    return RegisterResponse(message="User registered successfully", id=user.id.value)


@router.get("/login")
async def login(
    email: Annotated[str, Query(min_length=1)],
    password: Annotated[str, Query(min_length=1)],
    service: Annotated[PasswordAuthService, Depends(get_password_auth_service)],
) -> SessionResponse:
    """Exchange an email and password for a session token.

    Every mismatch (unknown email, inactive account, wrong password)
    answers with the same 401.
    """
    try:
        grant = await service.login(email=email, password=password)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return SessionResponse.from_grant(grant)


@router.get("/check-status")
async def check_status(
    principal: Annotated[User, Depends(require_roles(Role.USER))],
    service: Annotated[PasswordAuthService, Depends(get_password_auth_service)],
) -> SessionResponse:
    """Issue a fresh session token for the authenticated caller."""
    try:
        grant = await service.check_status(principal)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return SessionResponse.from_grant(grant)


@router.get("/me")
async def get_me(
    principal: Annotated[User, Depends(get_current_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    try:
        user = await service.get_profile(principal)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return UserResponse.from_domain(user)


@router.patch("/me")
async def update_me(
    request: UpdateProfileRequest,
    principal: Annotated[User, Depends(get_current_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Update the caller's profile.

    Raises:
        HTTPException: 409 if the new email belongs to another account
    """
    try:
        user = await service.update_profile(
            principal,
            email=request.email,
            user_name=request.user_name,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except IdentityError as e:
        raise to_http_exception(e) from e
    return UserResponse.from_domain(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    principal: Annotated[User, Depends(get_current_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> None:
    """Delete the caller's account together with its API keys."""
    try:
        await service.delete_account(principal)
    except IdentityError as e:
        raise to_http_exception(e) from e


@router.get("/users", dependencies=[Depends(require_roles(Role.ADMIN))])
async def list_users(
    service: Annotated[UserService, Depends(get_user_service)],
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[UserResponse]:
    try:
        users = await service.list_users(limit=limit, offset=offset)
    except IdentityError as e:
        raise to_http_exception(e) from e
    return [UserResponse.from_domain(user) for user in users]
