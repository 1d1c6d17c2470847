"""Unit tests for the User and APIKey aggregates and identity value objects."""

import pytest

from identity.domain.aggregates import APIKey, User
from identity.domain.value_objects import (
    APIKeyId,
    Profile,
    Role,
    UserId,
    normalize_email,
)


class TestIds:
    def test_generated_user_ids_are_valid_ulids(self):
        user_id = UserId.generate()

        assert UserId.from_string(user_id.value) == user_id

    def test_malformed_user_id_raises(self):
        with pytest.raises(ValueError):
            UserId.from_string("not-a-ulid")

    def test_malformed_api_key_id_raises(self):
        with pytest.raises(ValueError):
            APIKeyId.from_string("123")


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Alice@Example.COM ") == "alice@example.com"


class TestUser:
    def test_email_is_normalized_on_construction(self):
        user = User(id=UserId.generate(), email=" Bob@Example.com")

        assert user.email == "bob@example.com"

    def test_roles_deduplicated_in_order(self):
        user = User(
            id=UserId.generate(),
            email="a@example.com",
            roles=("admin", Role.USER, Role.ADMIN),
        )

        assert user.roles == (Role.ADMIN, Role.USER)

    def test_register_gives_default_role(self):
        user = User.register("a@example.com", "$2b$hash", Profile(first_name="A"))

        assert user.roles == (Role.USER,)
        assert user.has_password is True
        assert user.federated_id is None
        assert user.first_name == "A"

    def test_provision_federated_has_no_password(self):
        user = User.provision_federated("user_1", "f@example.com", Profile())

        assert user.federated_id == "user_1"
        assert user.has_password is False

    def test_provision_federated_requires_email(self):
        with pytest.raises(ValueError):
            User.provision_federated("user_1", "   ", Profile())

    def test_has_any_role(self):
        user = User(id=UserId.generate(), email="a@example.com")

        assert user.has_any_role([Role.USER, Role.ADMIN]) is True
        assert user.has_any_role(["admin"]) is False
        assert user.has_any_role([]) is False

    def test_update_profile_leaves_none_fields(self):
        user = User(
            id=UserId.generate(), email="a@example.com", user_name="a", last_name="L"
        )
        before = user.updated_at

        user.update_profile(email="B@example.com", first_name="First")

        assert user.email == "b@example.com"
        assert user.first_name == "First"
        assert user.user_name == "a"
        assert user.last_name == "L"
        assert user.updated_at >= before

    def test_equality_is_by_id(self):
        user_id = UserId.generate()

        assert User(id=user_id, email="a@example.com") == User(
            id=user_id, email="b@example.com"
        )


class TestAPIKey:
    def test_create_sets_owner_and_timestamps(self):
        owner_id = UserId.generate()

        api_key = APIKey.create(owner_id, key_digest="d" * 64, prefix="pcls_abcdefg")

        assert api_key.owner_id == owner_id
        assert api_key.is_active is True
        assert api_key.created_at is not None

    @pytest.mark.parametrize(
        ("key_active", "owner_active", "usable"),
        [(True, True, True), (False, True, False), (True, False, False)],
    )
    def test_usable_only_when_key_and_owner_active(
        self, key_active, owner_active, usable
    ):
        api_key = APIKey.create(UserId.generate(), key_digest="d", prefix="p")
        api_key.is_active = key_active

        assert api_key.is_usable_by(owner_active) is usable
