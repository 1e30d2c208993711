"""OAuth2 token acquisition for the Finnotech API.

The SDK keeps no token state. Storage and retrieval belong to the
application, which supplies a ``TokenDelegate``; ``TokenService`` only
talks to the token endpoint and hands every new token to the delegate.
"""

from __future__ import annotations

import base64
import logging
from typing import Protocol, runtime_checkable

from finnotech.client import FinnotechClient
from finnotech.models.auth import TokenRecord, TokenResponse
from finnotech.scopes import GrantType
from finnotech.utils.errors import (
    InvalidArgumentError,
    MissingDelegateError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)

TOKEN_PATH = "/dev/v2/oauth2/token"


@runtime_checkable
class TokenDelegate(Protocol):
    """Token storage capability implemented by the embedding application.

    Synchronous stores simply do their work inside ``async def`` methods.
    """

    async def fetch_access(self, scope_name: str) -> str:
        """Return the current access token for a scope."""
        ...

    async def fetch_refresh(self, scope_name: str) -> str:
        """Return the current refresh token for a scope."""
        ...

    async def persist(self, record: TokenRecord) -> None:
        """Store a newly issued token."""
        ...


class TokenService:
    """Client-credentials token flows against the Finnotech token endpoint."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        nid: str,
        client: FinnotechClient,
        delegate: TokenDelegate | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._nid = nid
        self._client = client
        self._delegate = delegate

    @property
    def client_id(self) -> str:
        return self._client_id

    def _require(self, operation: str):
        """Return the bound delegate method, or raise if it was not supplied."""
        method = getattr(self._delegate, operation, None) if self._delegate else None
        if method is None:
            raise MissingDelegateError(operation, f"{operation} delegate is not defined")
        return method

    async def get_access_token(self, scope_name: str) -> str:
        """Fetch the access token for a scope from the delegate."""
        return await self._require("fetch_access")(scope_name)

    async def get_refresh_token(self, scope_name: str) -> str:
        """Fetch the refresh token for a scope from the delegate."""
        return await self._require("fetch_refresh")(scope_name)

    async def set_tokens(self, record: TokenRecord) -> None:
        """Hand a token record to the delegate for storage."""
        await self._require("persist")(record)

    def _basic_auth(self) -> str:
        raw = f"{self._client_id}:{self._client_secret}".encode()
        return "Basic " + base64.b64encode(raw).decode()

    async def _issue(self, operation: str, body: dict[str, str], requested: list[str]) -> TokenRecord:
        """POST to the token endpoint and persist the issued token.

        When the response lists no scopes, the record covers the requested
        ones so the delegate can still index it.
        """
        response = await self._client.post(
            TOKEN_PATH,
            json=body,
            headers={"Authorization": self._basic_auth()},
        )
        try:
            token = TokenResponse.model_validate(response.json()["result"])
        except (ValueError, KeyError, TypeError) as e:
            raise UnexpectedResponseError(
                operation, f"token response has no valid result object: {e}",
            ) from e

        record = TokenRecord(
            access_token=token.value,
            refresh_token=token.refresh_token,
            life_time=token.life_time,
            scopes=token.scopes or list(requested),
            token_type=GrantType.CLIENT_CREDENTIALS,
        )
        logger.info(f"Issued client-credentials token for scopes: {', '.join(record.scopes)}")
        await self.set_tokens(record)
        return record

    async def get_client_credential_token(self, scopes: list[str]) -> TokenRecord:
        """Request a client-credentials token covering the given scopes.

        The token is passed to the delegate's ``persist`` and also returned.

        Raises:
            InvalidArgumentError: If ``scopes`` is empty. No request is made.
            TransportError: If the token endpoint call fails.
            UnexpectedResponseError: If a 2xx response carries no usable token.
        """
        if not scopes:
            raise InvalidArgumentError("get_client_credential_token", "scopes should not be empty")
        # Fail before touching the network when persist is unavailable
        self._require("persist")

        return await self._issue("get_client_credential_token", {
            "grant_type": "client_credentials",
            "nid": self._nid,
            "scopes": ",".join(scopes),
        }, scopes)

    async def get_client_credentials_refresh_token(self, scope_name: str) -> TokenRecord:
        """Refresh the client-credentials token for a scope.

        Reads the stored refresh token through the delegate, exchanges it,
        and persists the result.
        """
        refresh_token = await self.get_refresh_token(scope_name)
        self._require("persist")

        return await self._issue("get_client_credentials_refresh_token", {
            "grant_type": "refresh_token",
            "token_type": "CLIENT-CREDENTIAL",
            "refresh_token": refresh_token,
        }, [scope_name])
