"""Federated identity application service.

Two responsibilities:

- ``validate`` turns an identity-provider token into a local principal,
  provisioning a shadow record the first time a federated user is seen.
- The ``*_remote_user*`` operations administer identities at the provider
  and keep the local shadow records in step.

The provider and the local store are reconciled read-then-write; no
transaction spans both.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultFederatedIdentityProbe,
    FederatedIdentityProbe,
)
from identity.application.services.uniqueness import ensure_email_available
from identity.domain.aggregates import User
from identity.domain.value_objects import Profile
from identity.ports.exceptions import (
    BadRequestError,
    DuplicateFederatedIdError,
    EmailAlreadyRegisteredError,
    IdentityError,
    InternalError,
    InvalidCredentialsError,
    RemoteUserNotFoundError,
)
from identity.ports.identity_provider import (
    IdentityProviderError,
    IIdentityProvider,
    RemoteIdentity,
    RemoteIdentityChanges,
    RemoteIdentityDraft,
    RemoteUserQuery,
)
from identity.ports.repositories import IUserRepository
from shared_kernel.auth import FederatedTokenValidator, InvalidTokenError


def _profile_of(remote: RemoteIdentity) -> Profile:
    return Profile(
        user_name=remote.username or "",
        first_name=remote.first_name or "",
        last_name=remote.last_name or "",
    )


class FederatedIdentityService:
    """Application service for identity-provider backed accounts."""

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        identity_provider: IIdentityProvider,
        token_validator: FederatedTokenValidator,
        probe: FederatedIdentityProbe | None = None,
    ):
        self._session = session
        self._user_repository = user_repository
        self._identity_provider = identity_provider
        self._token_validator = token_validator
        self._probe = probe or DefaultFederatedIdentityProbe()

    async def validate(self, token: str) -> User:
        """Resolve the local principal for a federated token.

        Raises:
            InvalidCredentialsError: If the token is untrusted, the provider
                does not know the subject (or cannot be reached), the local
                account is inactive, or the identity cannot be provisioned
            InternalError: On unexpected store failures
        """
        if not token:
            self._probe.federated_validation_failed(reason="missing_token")
            raise InvalidCredentialsError()

        try:
            claims = await self._token_validator.validate_token(token)
        except InvalidTokenError as e:
            self._probe.federated_validation_failed(reason=str(e))
            raise InvalidCredentialsError() from e

        try:
            remote = await self._identity_provider.get_user(claims.sub)
        except IdentityProviderError as e:
            self._probe.federated_validation_failed(reason=f"provider_error: {e}")
            raise InvalidCredentialsError() from e

        try:
            async with self._session.begin():
                local = await self._user_repository.get_by_federated_id(claims.sub)
        except Exception as e:
            self._probe.store_operation_failed("resolve_shadow", error=str(e))
            raise InternalError() from e

        if remote is None:
            reason = "stale_local_record" if local is not None else "unknown_subject"
            self._probe.federated_validation_failed(reason=reason)
            raise InvalidCredentialsError()

        if local is not None:
            if not local.is_active:
                self._probe.federated_validation_failed(reason="inactive_account")
                raise InvalidCredentialsError()
            self._probe.federated_user_resolved(local.id.value, claims.sub)
            return local

        return await self._provision(remote)

    async def _provision(self, remote: RemoteIdentity) -> User:
        """Create the shadow record for ``remote`` on first sight.

        Losing a concurrent first login is not an error: the winner's row is
        read back and returned.
        """
        email = remote.email
        if email is None:
            self._probe.federated_validation_failed(reason="remote_identity_has_no_email")
            raise InvalidCredentialsError()

        try:
            async with self._session.begin():
                normalized = await ensure_email_available(self._user_repository, email)
                user = User.provision_federated(
                    federated_id=remote.id,
                    email=normalized,
                    profile=_profile_of(remote),
                )
                await self._user_repository.add(user)
        except (DuplicateFederatedIdError, EmailAlreadyRegisteredError) as e:
            # A concurrent first login may trip either unique constraint
            try:
                async with self._session.begin():
                    existing = await self._user_repository.get_by_federated_id(
                        remote.id
                    )
            except Exception as read_error:
                self._probe.store_operation_failed(
                    "provision_read_back", error=str(read_error)
                )
                raise InternalError() from read_error
            if existing is None:
                self._probe.federated_validation_failed(reason="email_in_use")
                raise InvalidCredentialsError() from e
            if not existing.is_active:
                self._probe.federated_validation_failed(reason="inactive_account")
                raise InvalidCredentialsError() from e
            self._probe.provisioning_race_resolved(remote.id)
            return existing
        except IdentityError:
            raise
        except Exception as e:
            self._probe.store_operation_failed("provision", error=str(e))
            raise InternalError() from e

        self._probe.federated_user_provisioned(user.id.value, remote.id)
        return user

    async def list_remote_users(self, query: RemoteUserQuery) -> list[RemoteIdentity]:
        """List identities at the provider.

        Raises:
            InternalError: If the provider call fails or answers unexpectedly
        """
        try:
            return await self._identity_provider.list_users(query)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.remote_operation_failed("list_users", error=str(e))
            raise InternalError() from e

    async def get_remote_user(self, remote_id: str) -> RemoteIdentity:
        """Fetch one identity from the provider.

        Raises:
            RemoteUserNotFoundError: If the provider does not know ``remote_id``
            InternalError: If the provider call fails
        """
        try:
            remote = await self._identity_provider.get_user(remote_id)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.remote_operation_failed("get_user", error=str(e))
            raise InternalError() from e

        if remote is None:
            raise RemoteUserNotFoundError(remote_id)
        return remote

    async def create_remote_user(
        self, draft: RemoteIdentityDraft
    ) -> tuple[RemoteIdentity, User]:
        """Create an identity at the provider and its local shadow record.

        The email is checked against local accounts before the provider is
        contacted.

        Raises:
            BadRequestError: If the draft carries no email address
            EmailAlreadyRegisteredError: If a local account has the email
            InternalError: If the provider or the store fails
        """
        requested = next(
            (address for address in draft.email_addresses if address.strip()), None
        )
        if requested is None:
            raise BadRequestError("At least one email address is required")

        try:
            async with self._session.begin():
                await ensure_email_available(self._user_repository, requested)

            remote = await self._identity_provider.create_user(draft)

            async with self._session.begin():
                normalized = await ensure_email_available(
                    self._user_repository, remote.email or requested
                )
                user = User.provision_federated(
                    federated_id=remote.id,
                    email=normalized,
                    profile=_profile_of(remote),
                )
                await self._user_repository.add(user)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.remote_operation_failed("create_user", error=str(e))
            raise InternalError() from e

        self._probe.remote_user_created(remote.id, user.id.value)
        return remote, user

    async def update_remote_user(
        self, remote_id: str, changes: RemoteIdentityChanges
    ) -> RemoteIdentity:
        """Update an identity at the provider and mirror names locally.

        Only first_name, last_name and username are propagated to the
        shadow record, and only those present in ``changes``.

        Raises:
            RemoteUserNotFoundError: If the provider does not know ``remote_id``
            InternalError: If the provider or the store fails
        """
        try:
            remote = await self._identity_provider.update_user(remote_id, changes)
            if remote is None:
                raise RemoteUserNotFoundError(remote_id)

            shadow_updated = False
            async with self._session.begin():
                local = await self._user_repository.get_by_federated_id(remote_id)
                if local is not None:
                    local.update_profile(
                        user_name=changes.username,
                        first_name=changes.first_name,
                        last_name=changes.last_name,
                    )
                    await self._user_repository.save(local)
                    shadow_updated = True
        except IdentityError:
            raise
        except Exception as e:
            self._probe.remote_operation_failed("update_user", error=str(e))
            raise InternalError() from e

        if not shadow_updated:
            self._probe.local_shadow_missing(remote_id)
        self._probe.remote_user_updated(remote_id, shadow_updated=shadow_updated)
        return remote

    async def delete_remote_user(self, remote_id: str) -> None:
        """Delete an identity at the provider, then its shadow record.

        A missing shadow record is logged, not raised.

        Raises:
            RemoteUserNotFoundError: If the provider does not know ``remote_id``
            InternalError: If the provider or the store fails
        """
        try:
            deleted = await self._identity_provider.delete_user(remote_id)
            if not deleted:
                raise RemoteUserNotFoundError(remote_id)

            async with self._session.begin():
                local = await self._user_repository.get_by_federated_id(remote_id)
                if local is not None:
                    await self._user_repository.delete(local)
        except IdentityError:
            raise
        except Exception as e:
            self._probe.remote_operation_failed("delete_user", error=str(e))
            raise InternalError() from e

        if local is None:
            self._probe.local_shadow_missing(remote_id)
        self._probe.remote_user_deleted(remote_id)

