"""HTTP implementation of IIdentityProvider for a Clerk-compatible admin API.

Endpoints used (relative to the configured API URL):

    GET    /users?limit=&offset=&order_by=
    GET    /users/{id}
    POST   /users
    PATCH  /users/{id}
    DELETE /users/{id}

Requests authenticate with the provider secret key as a bearer token.
"""

from __future__ import annotations

from typing import Any

import httpx

from identity.infrastructure.observability import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from identity.ports.identity_provider import (
    IdentityProviderError,
    IIdentityProvider,
    RemoteIdentity,
    RemoteIdentityChanges,
    RemoteIdentityDraft,
    RemoteUserQuery,
)


def parse_remote_identity(payload: Any) -> RemoteIdentity:
    """Convert a provider user object into a RemoteIdentity.

    Raises:
        IdentityProviderError: If the object is not a user with an id
    """
    if not isinstance(payload, dict) or not payload.get("id"):
        raise IdentityProviderError("Malformed user object in provider response")

    addresses = payload.get("email_addresses") or []
    primary_id = payload.get("primary_email_address_id")

    primary: str | None = None
    listed: list[str] = []
    for address in addresses:
        if not isinstance(address, dict):
            continue
        value = address.get("email_address") or ""
        listed.append(value)
        if primary_id and address.get("id") == primary_id:
            primary = value

    return RemoteIdentity(
        id=payload["id"],
        email_addresses=tuple(listed),
        primary_email_address=primary,
        username=payload.get("username"),
        first_name=payload.get("first_name"),
        last_name=payload.get("last_name"),
        external_id=payload.get("external_id"),
        created_at=payload.get("created_at"),
        raw=payload,
    )


class IdentityProviderClient(IIdentityProvider):
    """Async client for the identity provider's user administration API.

    A 404 on a user-scoped endpoint means "no such user" and is reported
    as None/False. Every other failure raises IdentityProviderError; there
    are no retries.
    """

    def __init__(
        self,
        api_url: str,
        secret_key: str,
        timeout_seconds: float = 5.0,
        probe: IdentityProviderProbe | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Base URL of the admin API, e.g. https://api.clerk.com/v1
            secret_key: Provider secret key
            timeout_seconds: Per-request timeout
            probe: Optional domain probe for observability
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self._probe = probe or DefaultIdentityProviderProbe()
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {secret_key}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_user(self, remote_id: str) -> RemoteIdentity | None:
        response = await self._request("get_user", "GET", f"/users/{remote_id}")
        if response.status_code == 404:
            self._probe.remote_user_missing("get_user", remote_id)
            return None
        return parse_remote_identity(self._json(response, "get_user"))

    async def list_users(self, query: RemoteUserQuery) -> list[RemoteIdentity]:
        params: dict[str, Any] = {"limit": query.limit, "offset": query.offset}
        if query.order_by:
            params["order_by"] = query.order_by

        response = await self._request("list_users", "GET", "/users", params=params)
        payload = self._json(response, "list_users")
        # The provider answers with a bare list or a {"data": [...]} envelope
        items = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise IdentityProviderError("list_users returned no user list")
        return [parse_remote_identity(item) for item in items]

    async def create_user(self, draft: RemoteIdentityDraft) -> RemoteIdentity:
        body: dict[str, Any] = {
            "email_address": list(draft.email_addresses),
            "password": draft.password,
            "first_name": draft.first_name,
            "last_name": draft.last_name,
        }
        if draft.username is not None:
            body["username"] = draft.username
        if draft.external_id is not None:
            body["external_id"] = draft.external_id

        response = await self._request("create_user", "POST", "/users", json=body)
        return parse_remote_identity(self._json(response, "create_user"))

    async def update_user(
        self, remote_id: str, changes: RemoteIdentityChanges
    ) -> RemoteIdentity | None:
        response = await self._request(
            "update_user", "PATCH", f"/users/{remote_id}", json=changes.as_payload()
        )
        if response.status_code == 404:
            self._probe.remote_user_missing("update_user", remote_id)
            return None
        return parse_remote_identity(self._json(response, "update_user"))

    async def delete_user(self, remote_id: str) -> bool:
        response = await self._request("delete_user", "DELETE", f"/users/{remote_id}")
        if response.status_code == 404:
            self._probe.remote_user_missing("delete_user", remote_id)
            return False
        return True

    async def _request(
        self, operation: str, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Send a request, letting 2xx and 404 through.

        Raises:
            IdentityProviderError: On transport errors and any other status
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self._probe.request_failed(operation, error=str(e))
            raise IdentityProviderError(f"{operation} failed: {e}") from e

        if response.status_code == 404 or response.is_success:
            if response.is_success:
                self._probe.request_succeeded(operation, response.status_code)
            return response

        self._probe.request_failed(
            operation,
            error=response.text[:200],
            status_code=response.status_code,
        )
        raise IdentityProviderError(
            f"{operation} failed with status {response.status_code}",
            status_code=response.status_code,
        )

    def _json(self, response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            self._probe.request_failed(
                operation, error="Unreadable response body", status_code=response.status_code
            )
            raise IdentityProviderError(f"{operation} returned invalid JSON") from e
