"""PostgreSQL implementation of IAPIKeyRepository.

Ownership is always part of the query predicate: a key id that exists but
belongs to another user behaves exactly like a key id that does not exist.
"""

from __future__ import annotations

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import APIKey, User
from identity.domain.value_objects import APIKeyId, UserId
from identity.infrastructure.models import APIKeyModel, UserModel
from identity.infrastructure.observability import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)
from identity.infrastructure.user_repository import user_from_model
from identity.ports.repositories import IAPIKeyRepository


class APIKeyRepository(IAPIKeyRepository):
    """Repository for APIKey aggregate persistence to PostgreSQL."""

    def __init__(
        self,
        session: AsyncSession,
        probe: APIKeyRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultAPIKeyRepositoryProbe()

    async def add(self, api_key: APIKey) -> None:
        model = APIKeyModel(
            id=api_key.id.value,
            owner_id=api_key.owner_id.value,
            key_digest=api_key.key_digest,
            prefix=api_key.prefix,
            is_active=api_key.is_active,
            created_at=api_key.created_at,
            updated_at=api_key.updated_at,
        )
        self._session.add(model)
        await self._session.flush()

        self._probe.api_key_saved(api_key.id.value, api_key.owner_id.value)

    async def list_by_owner(self, owner_id: UserId) -> list[APIKey]:
        stmt = (
            select(APIKeyModel)
            .where(APIKeyModel.owner_id == owner_id.value)
            .order_by(APIKeyModel.created_at, APIKeyModel.id)
        )
        result = await self._session.execute(stmt)
        api_keys = [self._to_aggregate(model) for model in result.scalars().all()]

        self._probe.api_key_list_retrieved(owner_id.value, len(api_keys))
        return api_keys

    async def get_by_id(self, api_key_id: APIKeyId, owner_id: UserId) -> APIKey | None:
        stmt = select(APIKeyModel).where(
            and_(
                APIKeyModel.id == api_key_id.value,
                APIKeyModel.owner_id == owner_id.value,
            )
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.api_key_not_found(api_key_id.value)
            return None

        self._probe.api_key_retrieved(api_key_id.value)
        return self._to_aggregate(model)

    async def get_with_owner_by_digest(
        self, key_digest: str
    ) -> tuple[APIKey, User] | None:
        """Retrieve a key and its owner for authentication.

        Soft-deleted owners are excluded, which makes their keys unusable.
        """
        stmt = (
            select(APIKeyModel, UserModel)
            .join(UserModel, UserModel.id == APIKeyModel.owner_id)
            .where(
                APIKeyModel.key_digest == key_digest,
                UserModel.deleted_at.is_(None),
            )
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()

        if row is None:
            self._probe.api_key_not_found()
            return None

        key_model, user_model = row
        self._probe.api_key_retrieved(key_model.id)
        return self._to_aggregate(key_model), user_from_model(user_model)

    async def delete(self, api_key_id: APIKeyId, owner_id: UserId) -> int:
        stmt = delete(APIKeyModel).where(
            and_(
                APIKeyModel.id == api_key_id.value,
                APIKeyModel.owner_id == owner_id.value,
            )
        )
        result = await self._session.execute(stmt)
        rowcount = result.rowcount or 0

        self._probe.api_key_deleted(api_key_id.value, rowcount)
        return rowcount

    def _to_aggregate(self, model: APIKeyModel) -> APIKey:
        return APIKey(
            id=APIKeyId(value=model.id),
            owner_id=UserId(value=model.owner_id),
            key_digest=model.key_digest,
            prefix=model.prefix,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
