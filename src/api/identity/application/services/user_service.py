"""User application service for self-service profile management."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from identity.application.services.uniqueness import ensure_email_available
from identity.domain.aggregates import User
from identity.ports.exceptions import (
    BadRequestError,
    IdentityError,
    InternalError,
    UserNotFoundError,
)
from identity.ports.repositories import IUserRepository


class UserService:
    """Application service for the principal's own account.

    Also serves the admin user listing.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: UserServiceProbe | None = None,
    ):
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultUserServiceProbe()

    async def get_profile(self, principal: User) -> User:
        """Re-read the principal's account.

        Raises:
            UserNotFoundError: If the account no longer exists
            InternalError: On unexpected store failures
        """
        try:
            async with self._session.begin():
                user = await self._user_repository.get_by_id(principal.id)
        except Exception as e:
            self._probe.operation_failed(
                "get_profile", user_id=principal.id.value, error=str(e)
            )
            raise InternalError() from e

        if user is None:
            raise UserNotFoundError()
        return user

    async def update_profile(
        self,
        principal: User,
        email: str | None = None,
        user_name: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """Change profile fields; ``None`` leaves a field unchanged.

        Raises:
            BadRequestError: If email is given but blank
            EmailAlreadyRegisteredError: If another account has the new email
            UserNotFoundError: If the account no longer exists
            InternalError: On unexpected store failures
        """
        if email is not None and not email.strip():
            raise BadRequestError("Email must not be blank")

        try:
            async with self._session.begin():
                user = await self._user_repository.get_by_id(principal.id)
                if user is None:
                    raise UserNotFoundError()

                if email is not None:
                    email = await ensure_email_available(
                        self._user_repository, email, exclude_user_id=user.id
                    )

                user.update_profile(
                    email=email,
                    user_name=user_name,
                    first_name=first_name,
                    last_name=last_name,
                )
                await self._user_repository.save(user)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.operation_failed(
                "update_profile", user_id=principal.id.value, error=str(e)
            )
            raise InternalError() from e

        self._probe.profile_updated(user.id.value)
        return user

    async def delete_account(self, principal: User) -> None:
        """Hard delete the principal's account; its API keys cascade.

        Raises:
            UserNotFoundError: If the account no longer exists
            InternalError: On unexpected store failures
        """
        try:
            async with self._session.begin():
                deleted = await self._user_repository.delete(principal)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.operation_failed(
                "delete_account", user_id=principal.id.value, error=str(e)
            )
            raise InternalError() from e

        if not deleted:
            raise UserNotFoundError()
        self._probe.account_deleted(principal.id.value)

    async def list_users(self, limit: int = 50, offset: int = 0) -> list[User]:
        """List accounts for administrators.

        Raises:
            InternalError: On unexpected store failures
        """
        try:
            async with self._session.begin():
                users = await self._user_repository.list_users(
                    limit=limit, offset=offset
                )
        except Exception as e:
            self._probe.operation_failed("list_users", error=str(e))
            raise InternalError() from e

        self._probe.users_listed(len(users))
        return users
