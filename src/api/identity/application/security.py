"""Security utilities for passwords and API keys.

Passwords are hashed with bcrypt. API keys are high-entropy random
secrets, so a fast SHA-256 digest is enough to store them and allows an
exact-match lookup by digest.
"""

import asyncio
import hashlib
import secrets
from functools import lru_cache

import bcrypt

API_KEY_PREFIX = "pcls_"
DEFAULT_BCRYPT_ROUNDS = 10
# bcrypt reads at most this many bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


@lru_cache
def dummy_password_hash(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """A throwaway hash at the given work factor.

    Compared against when no account matches, so a miss costs as much as a
    hit on an account hashed at the same rounds.
    """
    return bcrypt.hashpw(
        b"portcullis-timing-equalizer", bcrypt.gensalt(rounds=rounds)
    ).decode()


def generate_api_key_secret() -> str:
    """Generate a URL-safe API key with the pcls_ prefix.

    The prefix makes keys easy to spot in secret scanning and lets the
    authenticator tell an API key from a JWT at a glance.
    """
    # replace - with _ so that double-click selects the whole key
    random_part = secrets.token_urlsafe(32).replace("-", "_")
    return f"{API_KEY_PREFIX}{random_part}"


def extract_prefix(secret: str) -> str:
    """The first 12 characters, stored for display."""
    return secret[:12]


def digest_api_key_secret(secret: str) -> str:
    """Hex SHA-256 digest of an API key secret."""
    return hashlib.sha256(secret.encode()).hexdigest()


def looks_like_api_key(value: str) -> bool:
    return value.startswith(API_KEY_PREFIX)


def _password_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt at the given work factor."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(
    password: str,
    password_hash: str | None,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> bool:
    """Verify a password using bcrypt's constant-time comparison.

    A missing hash still costs one bcrypt comparison at ``rounds`` and
    returns False.
    """
    if not password_hash:
        bcrypt.checkpw(
            _password_bytes(password), dummy_password_hash(rounds).encode()
        )
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


async def hash_password_async(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """``hash_password`` run in a worker thread to keep the event loop free."""
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(
    password: str,
    password_hash: str | None,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> bool:
    """``verify_password`` run in a worker thread to keep the event loop free."""
    return await asyncio.to_thread(verify_password, password, password_hash, rounds)
