"""Role authorization gate, evaluated after authentication."""

from __future__ import annotations

from collections.abc import Iterable

from identity.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from identity.domain.aggregates import User
from identity.domain.value_objects import Role
from identity.ports.exceptions import ForbiddenError


class RoleGate:
    """Allows a principal holding at least one of the required roles.

    An empty requirement admits every authenticated principal.
    """

    def __init__(
        self,
        required: Iterable[Role | str] = (),
        probe: AuthenticationProbe | None = None,
    ):
        self._required = frozenset(Role(role) for role in required)
        self._probe = probe or DefaultAuthenticationProbe()

    @property
    def required(self) -> frozenset[Role]:
        return self._required

    def check(self, principal: User) -> User:
        """Return ``principal`` if admitted.

        Raises:
            ForbiddenError: If the principal holds none of the required roles
        """
        if not self._required or principal.has_any_role(self._required):
            return principal

        self._probe.authorization_denied(
            user_id=principal.id.value,
            required_roles=sorted(role.value for role in self._required),
        )
        raise ForbiddenError(
            f"User {principal.email} needs a valid role: "
            f"{', '.join(sorted(role.value for role in self._required))}"
        )
