"""Email uniqueness check shared by every account creation path."""

from __future__ import annotations

from identity.domain.value_objects import UserId, normalize_email
from identity.ports.exceptions import EmailAlreadyRegisteredError
from identity.ports.repositories import IUserRepository


async def ensure_email_available(
    user_repository: IUserRepository,
    email: str,
    exclude_user_id: UserId | None = None,
) -> str:
    """Check that no other account uses ``email``.

    Must run inside the caller's transaction, immediately before the insert
    or update it guards. The unique constraint on users.email remains the
    backstop for concurrent writers.

    Returns:
        The normalised email

    Raises:
        EmailAlreadyRegisteredError: If another account has the email
    """
    normalized = normalize_email(email)
    existing = await user_repository.get_by_email(normalized)
    if existing is not None and existing.id != exclude_user_id:
        raise EmailAlreadyRegisteredError(normalized)
    return normalized
