"""Unit tests for APIKeyService."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from identity.application.observability import APIKeyServiceProbe
from identity.application.security import API_KEY_PREFIX, digest_api_key_secret
from identity.application.services import APIKeyService
from identity.domain.aggregates import User
from identity.domain.value_objects import APIKeyId, UserId
from identity.ports.exceptions import (
    APIKeyNotFoundError,
    BadRequestError,
    InternalError,
    InvalidCredentialsError,
)
from identity.ports.repositories import IAPIKeyRepository


@pytest.fixture
def mock_probe():
    return create_autospec(APIKeyServiceProbe, instance=True)


@pytest.fixture
def service(fake_session, api_key_repo, mock_probe) -> APIKeyService:
    return APIKeyService(
        session=fake_session,
        api_key_repository=api_key_repo,
        probe=mock_probe,
    )


@pytest.fixture
def owner(user_repo, password_user) -> User:
    user_repo.seed(password_user)
    return password_user


@pytest.fixture
def other_user(user_repo) -> User:
    user = User(id=UserId.generate(), email="mallory@example.com")
    user_repo.seed(user)
    return user


class TestAPIKeyServiceInit:
    def test_uses_default_probe_when_not_provided(self, fake_session, api_key_repo):
        service = APIKeyService(session=fake_session, api_key_repository=api_key_repo)

        assert service._probe is not None


class TestIssue:
    @pytest.mark.asyncio
    async def test_returns_prefixed_secret_and_stores_only_digest(
        self, service, api_key_repo, owner
    ):
        api_key, secret = await service.issue(owner)

        assert secret.startswith(API_KEY_PREFIX)
        assert len(secret) > 40
        stored = api_key_repo.keys[api_key.id.value]
        assert stored.key_digest == digest_api_key_secret(secret)
        assert secret not in (stored.key_digest, stored.prefix)
        assert stored.prefix == secret[:12]
        assert stored.owner_id == owner.id
        assert stored.is_active is True

    @pytest.mark.asyncio
    async def test_each_key_is_unique(self, service, owner):
        _, first = await service.issue(owner)
        _, second = await service.issue(owner)

        assert first != second

    @pytest.mark.asyncio
    async def test_emits_api_key_created(self, service, owner, mock_probe):
        api_key, _ = await service.issue(owner)

        mock_probe.api_key_created.assert_called_once_with(
            api_key_id=api_key.id.value, user_id=owner.id.value
        )

    @pytest.mark.asyncio
    async def test_wraps_store_failures(self, fake_session, owner, mock_probe):
        repo = create_autospec(IAPIKeyRepository, instance=True)
        repo.add = AsyncMock(side_effect=RuntimeError("disk full"))
        service = APIKeyService(
            session=fake_session, api_key_repository=repo, probe=mock_probe
        )

        with pytest.raises(InternalError):
            await service.issue(owner)

        mock_probe.api_key_creation_failed.assert_called_once_with(
            user_id=owner.id.value, error="disk full"
        )


class TestListKeys:
    @pytest.mark.asyncio
    async def test_returns_only_the_callers_keys(self, service, owner, other_user):
        mine, _ = await service.issue(owner)
        await service.issue(other_user)

        keys = await service.list_keys(owner)

        assert [key.id for key in keys] == [mine.id]

    @pytest.mark.asyncio
    async def test_empty_when_caller_has_no_keys(self, service, owner):
        assert await service.list_keys(owner) == []

    @pytest.mark.asyncio
    async def test_store_failure_is_internal_error(
        self, service, api_key_repo, owner, mock_probe, monkeypatch
    ):
        monkeypatch.setattr(
            api_key_repo, "list_by_owner", AsyncMock(side_effect=RuntimeError("Boom"))
        )

        with pytest.raises(InternalError):
            await service.list_keys(owner)

        mock_probe.api_key_list_retrieval_failed.assert_called_once_with(
            user_id=owner.id.value, error="Boom"
        )


class TestRevoke:
    @pytest.mark.asyncio
    async def test_deletes_own_key(self, service, api_key_repo, owner, mock_probe):
        api_key, _ = await service.issue(owner)

        message = await service.revoke(owner, api_key.id.value)

        assert api_key.id.value in message
        assert api_key.id.value not in api_key_repo.keys
        mock_probe.api_key_revoked.assert_called_once_with(
            api_key_id=api_key.id.value, user_id=owner.id.value
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blank", ["", "   "])
    async def test_rejects_blank_id(self, service, owner, blank):
        with pytest.raises(BadRequestError):
            await service.revoke(owner, blank)

    @pytest.mark.asyncio
    async def test_not_found_is_indistinguishable(
        self, service, api_key_repo, owner, other_user
    ):
        others_key, _ = await service.issue(other_user)

        messages = set()
        for key_id in ["not-a-ulid", APIKeyId.generate().value, others_key.id.value]:
            with pytest.raises(APIKeyNotFoundError) as exc_info:
                await service.revoke(owner, key_id)
            messages.add(exc_info.value.message)

        assert len(messages) == 1
        assert others_key.id.value in api_key_repo.keys

    @pytest.mark.asyncio
    async def test_concurrent_delete_is_internal_error(
        self, fake_session, owner, mock_probe
    ):
        api_key_id = APIKeyId.generate()
        repo = create_autospec(IAPIKeyRepository, instance=True)
        repo.get_by_id = AsyncMock(return_value=MagicMock())
        repo.delete = AsyncMock(return_value=0)
        service = APIKeyService(
            session=fake_session, api_key_repository=repo, probe=mock_probe
        )

        with pytest.raises(InternalError, match="could not be deleted"):
            await service.revoke(owner, api_key_id.value)

        mock_probe.api_key_revocation_failed.assert_called_once()


class TestValidate:
    @pytest.mark.asyncio
    async def test_resolves_owner(self, service, owner):
        _, secret = await service.issue(owner)

        principal = await service.validate(secret)

        assert principal.id == owner.id

    @pytest.mark.asyncio
    async def test_rejects_unknown_key(self, service, owner):
        await service.issue(owner)

        with pytest.raises(InvalidCredentialsError):
            await service.validate(f"{API_KEY_PREFIX}unknown")

    @pytest.mark.asyncio
    async def test_rejects_empty_key(self, service):
        with pytest.raises(InvalidCredentialsError):
            await service.validate("")

    @pytest.mark.asyncio
    async def test_rejects_inactive_key(self, service, api_key_repo, owner, mock_probe):
        api_key, secret = await service.issue(owner)
        api_key_repo.keys[api_key.id.value].is_active = False

        with pytest.raises(InvalidCredentialsError):
            await service.validate(secret)

        mock_probe.api_key_validation_failed.assert_called_with(reason="key_inactive")

    @pytest.mark.asyncio
    async def test_rejects_key_of_inactive_owner(
        self, service, user_repo, owner, mock_probe
    ):
        _, secret = await service.issue(owner)
        user_repo.users[owner.id.value].is_active = False

        with pytest.raises(InvalidCredentialsError):
            await service.validate(secret)

        mock_probe.api_key_validation_failed.assert_called_with(reason="owner_inactive")

    @pytest.mark.asyncio
    async def test_deleted_key_no_longer_validates(self, service, owner):
        api_key, secret = await service.issue(owner)
        await service.revoke(owner, api_key.id.value)

        with pytest.raises(InvalidCredentialsError):
            await service.validate(secret)

    @pytest.mark.asyncio
    async def test_store_failure_is_internal_error(
        self, service, api_key_repo, mock_probe, monkeypatch
    ):
        monkeypatch.setattr(
            api_key_repo,
            "get_with_owner_by_digest",
            AsyncMock(side_effect=RuntimeError("Boom")),
        )

        with pytest.raises(InternalError):
            await service.validate(f"{API_KEY_PREFIX}whatever")

        mock_probe.api_key_validation_failed.assert_called_once_with(
            reason="store_error: Boom"
        )
