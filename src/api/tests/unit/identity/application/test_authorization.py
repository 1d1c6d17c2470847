"""Unit tests for RoleGate."""

from __future__ import annotations

from unittest.mock import create_autospec

import pytest

from identity.application.authorization import RoleGate
from identity.application.observability import AuthenticationProbe
from identity.domain.aggregates import User
from identity.domain.value_objects import Role, UserId
from identity.ports.exceptions import ForbiddenError


@pytest.fixture
def mock_probe():
    return create_autospec(AuthenticationProbe, instance=True)


def make_user(*roles: Role) -> User:
    return User(id=UserId.generate(), email="user@example.com", roles=roles)


class TestRoleGate:
    def test_empty_requirement_admits_any_principal(self):
        user = make_user(Role.USER)

        assert RoleGate().check(user) is user

    def test_admits_principal_with_required_role(self):
        user = make_user(Role.USER)

        assert RoleGate([Role.USER]).check(user) is user

    def test_any_one_of_several_roles_is_enough(self):
        user = make_user(Role.ADMIN)

        assert RoleGate([Role.USER, Role.ADMIN]).check(user) is user

    def test_accepts_role_names(self):
        assert RoleGate(["admin"]).required == frozenset({Role.ADMIN})

    def test_rejects_principal_without_required_role(self, mock_probe):
        user = make_user(Role.USER)
        gate = RoleGate([Role.ADMIN], probe=mock_probe)

        with pytest.raises(ForbiddenError) as exc_info:
            gate.check(user)

        assert "user@example.com" in exc_info.value.message
        assert "admin" in exc_info.value.message
        mock_probe.authorization_denied.assert_called_once_with(
            user_id=user.id.value, required_roles=["admin"]
        )

    def test_principal_without_roles_is_rejected(self):
        with pytest.raises(ForbiddenError):
            RoleGate([Role.USER]).check(make_user())

    def test_unknown_role_name_is_rejected_at_construction(self):
        with pytest.raises(ValueError):
            RoleGate(["superuser"])
