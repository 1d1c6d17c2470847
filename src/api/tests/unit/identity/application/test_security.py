"""Unit tests for password hashing and API key helpers."""

import hashlib

import pytest

from identity.application.security import (
    API_KEY_PREFIX,
    digest_api_key_secret,
    dummy_password_hash,
    extract_prefix,
    generate_api_key_secret,
    hash_password,
    hash_password_async,
    looks_like_api_key,
    verify_password,
    verify_password_async,
)


class TestPasswordHashing:
    def test_hash_is_bcrypt_with_requested_rounds(self):
        hashed = hash_password("Abc12345!", rounds=4)

        assert hashed.startswith("$2b$04$")

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("Abc12345!", rounds=4)

        assert verify_password("Abc12345!", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("Abc12345!", rounds=4)

        assert verify_password("abc12345!", hashed) is False

    def test_verify_without_hash_is_false(self):
        assert verify_password("Abc12345!", None) is False

    def test_dummy_hash_matches_requested_rounds(self):
        assert dummy_password_hash(4).startswith("$2b$04$")
        assert dummy_password_hash(5).startswith("$2b$05$")
        assert dummy_password_hash(5) is dummy_password_hash(5)

    def test_verify_without_hash_compares_at_requested_rounds(self, monkeypatch):
        compared: list[bytes] = []
        monkeypatch.setattr(
            "identity.application.security.bcrypt.checkpw",
            lambda password, hashed: compared.append(hashed) or False,
        )

        assert verify_password("Abc12345!", None, rounds=4) is False
        assert compared == [dummy_password_hash(4).encode()]

    def test_verify_with_malformed_hash_is_false(self):
        assert verify_password("Abc12345!", "not-a-bcrypt-hash") is False

    def test_long_passwords_are_accepted(self):
        password = "p" * 128
        hashed = hash_password(password, rounds=4)

        assert verify_password(password, hashed) is True

    @pytest.mark.asyncio
    async def test_async_variants_round_trip(self):
        hashed = await hash_password_async("Abc12345!", rounds=4)

        assert await verify_password_async("Abc12345!", hashed) is True


class TestAPIKeySecrets:
    def test_generated_secret_has_prefix_and_entropy(self):
        secret = generate_api_key_secret()

        assert secret.startswith(API_KEY_PREFIX)
        # token_urlsafe(32) yields 43 characters
        assert len(secret) == len(API_KEY_PREFIX) + 43
        assert "-" not in secret

    def test_generated_secrets_differ(self):
        assert generate_api_key_secret() != generate_api_key_secret()

    def test_prefix_is_first_twelve_characters(self):
        assert extract_prefix("pcls_abcdefghijklmnop") == "pcls_abcdefg"

    def test_digest_is_sha256_hex(self):
        secret = "pcls_example"

        assert digest_api_key_secret(secret) == hashlib.sha256(secret.encode()).hexdigest()

    def test_looks_like_api_key(self):
        assert looks_like_api_key("pcls_abc") is True
        assert looks_like_api_key("eyJhbGciOiJSUzI1NiJ9.e30.sig") is False
