"""Password authentication service.

Registers password accounts, verifies email/password pairs and issues
session tokens.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultPasswordAuthProbe,
    PasswordAuthProbe,
)
from identity.application.security import (
    DEFAULT_BCRYPT_ROUNDS,
    dummy_password_hash,
    hash_password_async,
    verify_password_async,
)
from identity.application.services.uniqueness import ensure_email_available
from identity.application.value_objects import SessionGrant
from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, UserId
from identity.ports.exceptions import (
    BadRequestError,
    IdentityError,
    InternalError,
    InvalidCredentialsError,
)
from identity.ports.repositories import IUserRepository
from shared_kernel.auth import InvalidTokenError, SessionTokenService


class PasswordAuthService:
    """Application service for password accounts and session tokens.

    Manages database transactions. Every authentication failure raises
    ``InvalidCredentialsError`` so that callers cannot distinguish an
    unknown email from a wrong password or an inactive account.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        session_tokens: SessionTokenService,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        probe: PasswordAuthProbe | None = None,
    ):
        self._session = session
        self._user_repository = user_repository
        self._session_tokens = session_tokens
        self._bcrypt_rounds = bcrypt_rounds
        # Built up front so the first miss costs no more than later ones
        dummy_password_hash(bcrypt_rounds)
        self._probe = probe or DefaultPasswordAuthProbe()

    async def register(
        self, email: str, password: str, profile: Profile | None = None
    ) -> User:
        """Create a password account with the default roles.

        Raises:
            BadRequestError: If email or password is blank
            EmailAlreadyRegisteredError: If the email is taken
            InternalError: On unexpected store failures
        """
        if not email or not email.strip() or not password:
            raise BadRequestError("Email and password are required")

        try:
            password_hash = await hash_password_async(password, self._bcrypt_rounds)

            async with self._session.begin():
                normalized = await ensure_email_available(self._user_repository, email)
                user = User.register(
                    email=normalized,
                    password_hash=password_hash,
                    profile=profile or Profile(),
                )
                await self._user_repository.add(user)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.registration_failed(error=str(e))
            raise InternalError() from e

        self._probe.user_registered(user.id.value)
        return user

    async def authenticate_password(self, email: str, password: str) -> User:
        """Resolve the active account matching an email/password pair.

        A bcrypt comparison runs whether or not the account exists.

        Raises:
            InvalidCredentialsError: On any mismatch
            InternalError: On unexpected store failures
        """
        if not email or not password:
            self._probe.login_failed(reason="missing_credentials")
            raise InvalidCredentialsError()

        try:
            async with self._session.begin():
                user = await self._user_repository.get_by_email(email)

            password_hash = user.password_hash if user is not None else None
            matches = await verify_password_async(
                password, password_hash, self._bcrypt_rounds
            )
        except IdentityError:
            raise
        except Exception as e:
            self._probe.operation_failed("authenticate_password", error=str(e))
            raise InternalError() from e

        if user is None:
            self._probe.login_failed(reason="unknown_email")
            raise InvalidCredentialsError()
        if not user.is_active:
            self._probe.login_failed(reason="inactive_account")
            raise InvalidCredentialsError()
        if not matches:
            self._probe.login_failed(reason="password_mismatch")
            raise InvalidCredentialsError()

        return user

    async def login(self, email: str, password: str) -> SessionGrant:
        """Verify credentials and issue a session token.

        Raises:
            InvalidCredentialsError: On any mismatch
            InternalError: On unexpected store or signing failures
        """
        user = await self.authenticate_password(email, password)
        grant = self._grant(user, operation="login")
        self._probe.login_succeeded(user.id.value)
        return grant

    async def check_status(self, principal: User) -> SessionGrant:
        """Issue a fresh session token for an already authenticated principal.

        Raises:
            InternalError: If the token cannot be signed
        """
        grant = self._grant(principal, operation="check_status")
        self._probe.session_refreshed(principal.id.value)
        return grant

    async def authenticate_session_token(self, token: str) -> User:
        """Resolve the principal of a session token.

        The token is checked by signature and expiry only. The account must
        still exist and be active, which is how sessions are revoked.

        Raises:
            InvalidCredentialsError: If the token or its account is unusable
            InternalError: On unexpected store failures
        """
        try:
            claims = self._session_tokens.verify(token)
            user_id = UserId.from_string(claims.sub)
        except (InvalidTokenError, ValueError) as e:
            self._probe.session_rejected(reason=str(e))
            raise InvalidCredentialsError() from e

        try:
            async with self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
        except Exception as e:
            self._probe.operation_failed("authenticate_session_token", error=str(e))
            raise InternalError() from e

        if user is None or not user.is_active:
            self._probe.session_rejected(reason="account_unavailable")
            raise InvalidCredentialsError()

        return user

    def _grant(self, user: User, operation: str) -> SessionGrant:
        try:
            token = self._session_tokens.issue(user.id.value)
        except Exception as e:
            self._probe.operation_failed(operation, error=str(e))
            raise InternalError() from e
        return SessionGrant(
            principal=user,
            access_token=token.value,
            expires_at=token.expires_at,
        )
