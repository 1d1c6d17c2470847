"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.domain.value_objects import Role, UserId, normalize_email
from identity.infrastructure.models import (
    USERS_EMAIL_CONSTRAINT,
    USERS_FEDERATED_ID_CONSTRAINT,
    UserModel,
)
from identity.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.ports.exceptions import (
    DuplicateFederatedIdError,
    EmailAlreadyRegisteredError,
)
from identity.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Writes are flushed immediately so that unique constraint violations
    surface here, translated into domain exceptions, rather than at commit.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def get_by_id(self, user_id: UserId) -> User | None:
        stmt = select(UserModel).where(
            UserModel.id == user_id.value,
            UserModel.deleted_at.is_(None),
        )
        return await self._fetch_one(stmt, lookup=f"id:{user_id.value}")

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(
            UserModel.email == normalize_email(email),
            UserModel.deleted_at.is_(None),
        )
        return await self._fetch_one(stmt, lookup="email")

    async def get_by_federated_id(self, federated_id: str) -> User | None:
        stmt = select(UserModel).where(
            UserModel.federated_id == federated_id,
            UserModel.deleted_at.is_(None),
        )
        return await self._fetch_one(stmt, lookup=f"federated_id:{federated_id}")

    async def list_users(self, limit: int = 50, offset: int = 0) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.deleted_at.is_(None))
            .order_by(UserModel.created_at, UserModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [user_from_model(model) for model in result.scalars().all()]

    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
            DuplicateFederatedIdError: If the federated id is already linked
        """
        model = UserModel(
            id=user.id.value,
            email=user.email,
            user_name=user.user_name,
            first_name=user.first_name,
            last_name=user.last_name,
            password_hash=user.password_hash,
            federated_id=user.federated_id,
            is_active=user.is_active,
            roles=[role.value for role in user.roles],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self._session.add(model)
        await self._flush(user)
        self._probe.user_saved(user.id.value)

    async def save(self, user: User) -> None:
        """Update an existing user.

        Raises:
            EmailAlreadyRegisteredError: If the new email is taken
        """
        stmt = select(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            self._probe.user_not_found(f"id:{user.id.value}")
            return

        model.email = user.email
        model.user_name = user.user_name
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.password_hash = user.password_hash
        model.federated_id = user.federated_id
        model.is_active = user.is_active
        model.roles = [role.value for role in user.roles]

        await self._flush(user)
        self._probe.user_saved(user.id.value)

    async def delete(self, user: User) -> bool:
        stmt = delete(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        deleted = bool(result.rowcount)
        if deleted:
            self._probe.user_deleted(user.id.value)
        return deleted

    async def _fetch_one(self, stmt, lookup: str) -> User | None:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(lookup)
            return None

        self._probe.user_retrieved(model.id)
        return user_from_model(model)

    async def _flush(self, user: User) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            if USERS_EMAIL_CONSTRAINT in message:
                self._probe.uniqueness_violated(USERS_EMAIL_CONSTRAINT)
                raise EmailAlreadyRegisteredError(user.email) from e
            if USERS_FEDERATED_ID_CONSTRAINT in message:
                self._probe.uniqueness_violated(USERS_FEDERATED_ID_CONSTRAINT)
                raise DuplicateFederatedIdError(user.federated_id or "") from e
            raise


def user_from_model(model: UserModel) -> User:
    """Convert a UserModel row to the User aggregate."""
    return User(
        id=UserId(value=model.id),
        email=model.email,
        user_name=model.user_name,
        first_name=model.first_name,
        last_name=model.last_name,
        password_hash=model.password_hash,
        federated_id=model.federated_id,
        is_active=model.is_active,
        roles=tuple(Role(role) for role in model.roles),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
