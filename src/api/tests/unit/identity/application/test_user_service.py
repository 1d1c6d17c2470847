"""Unit tests for UserService."""

from __future__ import annotations

from unittest.mock import AsyncMock, create_autospec

import pytest

from identity.application.observability import UserServiceProbe
from identity.application.services import UserService
from identity.domain.aggregates import User
from identity.domain.value_objects import UserId
from identity.ports.exceptions import (
    BadRequestError,
    EmailAlreadyRegisteredError,
    InternalError,
    UserNotFoundError,
)


@pytest.fixture
def mock_probe():
    return create_autospec(UserServiceProbe, instance=True)


@pytest.fixture
def service(fake_session, user_repo, mock_probe) -> UserService:
    return UserService(session=fake_session, user_repository=user_repo, probe=mock_probe)


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_rereads_the_account(self, service, user_repo, password_user):
        user_repo.seed(password_user)
        user_repo.users[password_user.id.value].first_name = "Changed"

        user = await service.get_profile(password_user)

        assert user.first_name == "Changed"

    @pytest.mark.asyncio
    async def test_missing_account_is_not_found(self, service, password_user):
        with pytest.raises(UserNotFoundError):
            await service.get_profile(password_user)


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_updates_given_fields_only(self, service, user_repo, password_user):
        user_repo.seed(password_user)

        user = await service.update_profile(password_user, first_name="Alice")

        assert user.first_name == "Alice"
        assert user.user_name == "alice"
        assert user_repo.users[password_user.id.value].first_name == "Alice"

    @pytest.mark.asyncio
    async def test_normalizes_new_email(self, service, user_repo, password_user):
        user_repo.seed(password_user)

        user = await service.update_profile(password_user, email=" New@Example.COM ")

        assert user.email == "new@example.com"

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_allowed(self, service, user_repo, password_user):
        user_repo.seed(password_user)

        user = await service.update_profile(password_user, email="ALICE@example.com")

        assert user.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_email_of_another_account_conflicts(
        self, service, user_repo, password_user
    ):
        user_repo.seed(password_user, User(id=UserId.generate(), email="bob@example.com"))

        with pytest.raises(EmailAlreadyRegisteredError):
            await service.update_profile(password_user, email="Bob@example.com")

        assert user_repo.users[password_user.id.value].email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_blank_email_is_bad_request(self, service, password_user):
        with pytest.raises(BadRequestError):
            await service.update_profile(password_user, email="  ")

    @pytest.mark.asyncio
    async def test_emits_profile_updated(self, service, user_repo, password_user, mock_probe):
        user_repo.seed(password_user)

        await service.update_profile(password_user, last_name="Liddell")

        mock_probe.profile_updated.assert_called_once_with(password_user.id.value)


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_removes_the_account(
        self, service, user_repo, password_user, mock_probe
    ):
        user_repo.seed(password_user)

        await service.delete_account(password_user)

        assert user_repo.users == {}
        mock_probe.account_deleted.assert_called_once_with(password_user.id.value)

    @pytest.mark.asyncio
    async def test_missing_account_is_not_found(self, service, password_user):
        with pytest.raises(UserNotFoundError):
            await service.delete_account(password_user)


class TestListUsers:
    @pytest.mark.asyncio
    async def test_pages_through_accounts(self, service, user_repo):
        users = [User(id=UserId.generate(), email=f"u{i}@example.com") for i in range(4)]
        user_repo.seed(*users)

        page = await service.list_users(limit=2, offset=1)

        assert len(page) == 2


class TestUnexpectedFailures:
    @pytest.mark.asyncio
    async def test_get_profile_store_failure(
        self, service, user_repo, password_user, mock_probe, monkeypatch
    ):
        monkeypatch.setattr(
            user_repo, "get_by_id", AsyncMock(side_effect=RuntimeError("Boom"))
        )

        with pytest.raises(InternalError):
            await service.get_profile(password_user)

        mock_probe.operation_failed.assert_called_once_with(
            "get_profile", user_id=password_user.id.value, error="Boom"
        )

    @pytest.mark.asyncio
    async def test_list_users_store_failure(
        self, service, user_repo, mock_probe, monkeypatch
    ):
        monkeypatch.setattr(
            user_repo, "list_users", AsyncMock(side_effect=RuntimeError("Boom"))
        )

        with pytest.raises(InternalError):
            await service.list_users()

        mock_probe.operation_failed.assert_called_once_with("list_users", error="Boom")
        mock_probe.users_listed.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_account_store_failure(
        self, service, user_repo, password_user, monkeypatch
    ):
        monkeypatch.setattr(
            user_repo, "delete", AsyncMock(side_effect=RuntimeError("Boom"))
        )

        with pytest.raises(InternalError):
            await service.delete_account(password_user)
