"""API Key application service for the identity bounded context.

Orchestrates API key issuance, listing, deletion and validation.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from identity.application.security import (
    digest_api_key_secret,
    extract_prefix,
    generate_api_key_secret,
)
from identity.domain.aggregates import APIKey, User
from identity.domain.value_objects import APIKeyId
from identity.ports.exceptions import (
    APIKeyNotFoundError,
    BadRequestError,
    IdentityError,
    InternalError,
    InvalidCredentialsError,
)
from identity.ports.repositories import IAPIKeyRepository


class APIKeyService:
    """Application service for API key management.

    Keys are scoped to their owner: every operation takes the
    authenticated principal and never touches anyone else's keys.
    """

    def __init__(
        self,
        session: AsyncSession,
        api_key_repository: IAPIKeyRepository,
        probe: APIKeyServiceProbe | None = None,
    ):
        """Initialize APIKeyService with dependencies.

        Args:
            session: Database session for transaction management
            api_key_repository: Repository for API key persistence
            probe: Optional domain probe for observability
        """
        self._session = session
        self._api_key_repository = api_key_repository
        self._probe = probe or DefaultAPIKeyServiceProbe()

    async def issue(self, owner: User) -> tuple[APIKey, str]:
        """Create a new API key for ``owner``.

        Returns both the aggregate and the plaintext secret - the secret is
        only available at creation time.

        Raises:
            InternalError: On unexpected store failures
        """
        try:
            plaintext_secret = generate_api_key_secret()
            api_key = APIKey.create(
                owner_id=owner.id,
                key_digest=digest_api_key_secret(plaintext_secret),
                prefix=extract_prefix(plaintext_secret),
            )

            async with self._session.begin():
                await self._api_key_repository.add(api_key)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.api_key_creation_failed(user_id=owner.id.value, error=str(e))
            raise InternalError() from e

        self._probe.api_key_created(api_key_id=api_key.id.value, user_id=owner.id.value)
        return api_key, plaintext_secret

    async def list_keys(self, owner: User) -> list[APIKey]:
        """List the keys owned by ``owner``.

        Raises:
            InternalError: On unexpected store failures
        """
        try:
            async with self._session.begin():
                keys = await self._api_key_repository.list_by_owner(owner.id)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.api_key_list_retrieval_failed(
                user_id=owner.id.value, error=str(e)
            )
            raise InternalError() from e

        self._probe.api_key_list_retrieved(user_id=owner.id.value, count=len(keys))
        return keys

    async def revoke(self, owner: User, api_key_id: str) -> str:
        """Delete one of ``owner``'s keys.

        A malformed id, an unknown id and another user's key all raise the
        same ``APIKeyNotFoundError``.

        Returns:
            A confirmation message

        Raises:
            BadRequestError: If api_key_id is blank
            APIKeyNotFoundError: If the caller owns no such key
            InternalError: If the key vanished between lookup and delete
        """
        if not api_key_id or not api_key_id.strip():
            raise BadRequestError("API key id is required")

        try:
            key_id = APIKeyId.from_string(api_key_id.strip())
        except ValueError as e:
            raise APIKeyNotFoundError() from e

        try:
            async with self._session.begin():
                api_key = await self._api_key_repository.get_by_id(key_id, owner.id)
                if api_key is None:
                    raise APIKeyNotFoundError()

                deleted = await self._api_key_repository.delete(key_id, owner.id)
                if deleted == 0:
                    # Concurrent deletion between the lookup and the delete
                    raise InternalError("API key could not be deleted")
        except IdentityError as e:
            if isinstance(e, InternalError):
                self._probe.api_key_revocation_failed(key_id.value, error=e.message)
            raise
        except Exception as e:
            self._probe.api_key_revocation_failed(key_id.value, error=str(e))
            raise InternalError() from e

        self._probe.api_key_revoked(api_key_id=key_id.value, user_id=owner.id.value)
        return f"API key {key_id.value} deleted"

    async def validate(self, presented_key: str) -> User:
        """Resolve the owner of a presented API key.

        Raises:
            InvalidCredentialsError: If the key is unknown or inactive, or
                its owner is inactive
            InternalError: On unexpected store failures
        """
        if not presented_key:
            self._probe.api_key_validation_failed(reason="missing_key")
            raise InvalidCredentialsError()

        digest = digest_api_key_secret(presented_key)
        try:
            async with self._session.begin():
                found = await self._api_key_repository.get_with_owner_by_digest(digest)
        except Exception as e:
            self._probe.api_key_validation_failed(reason=f"store_error: {e}")
            raise InternalError() from e

        if found is None:
            self._probe.api_key_validation_failed(reason="not_found")
            raise InvalidCredentialsError()

        api_key, owner = found
        if not api_key.is_usable_by(owner.is_active):
            reason = "key_inactive" if not api_key.is_active else "owner_inactive"
            self._probe.api_key_validation_failed(reason=reason)
            raise InvalidCredentialsError()

        return owner
