"""Entry point for library users: wires client, token service and services."""

from __future__ import annotations

from typing import Any

import httpx

from finnotech.auth import TokenDelegate, TokenService
from finnotech.client import DEFAULT_TIMEOUT, FinnotechClient
from finnotech.config import Config
from finnotech.services.oak import OakService


class Finnotech:
    """Finnotech SDK.

    Example::

        async with Finnotech(
            client_id="my-client",
            client_secret="secret",
            nid="0012345678",
            base_url="https://sandboxapi.finnotech.ir",
            delegate=MyTokenStore(),
        ) as fin:
            await fin.token.get_client_credential_token(["oak:iban-inquiry:get"])
            result = await fin.oak.iban_inquiry({"iban": "IR..."})
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        nid: str,
        base_url: str,
        delegate: TokenDelegate | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.client = FinnotechClient(base_url, timeout=timeout, http=http)
        self.token = TokenService(client_id, client_secret, nid, self.client, delegate)
        self.oak = OakService(self.token, self.client)

    @classmethod
    def from_config(
        cls,
        config: Config,
        delegate: TokenDelegate | None = None,
        environment: str | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> Finnotech:
        """Build an SDK instance from loaded configuration."""
        settings = config.settings
        return cls(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            nid=settings.nid,
            base_url=config.get_environment(environment).base_url,
            delegate=delegate,
            timeout=settings.timeout,
            http=http,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> Finnotech:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
