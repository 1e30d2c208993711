"""Shared fixtures for the finnotech test suite."""
from __future__ import annotations

import json

import httpx
import pytest

from finnotech.auth import TokenService
from finnotech.client import FinnotechClient
from finnotech.config import Config, EnvironmentProfile, Settings
from finnotech.models.auth import TokenRecord
from finnotech.scopes import GrantType, Scope
from finnotech.services.oak import OakService
from finnotech.token_store import MemoryTokenStore

BASE_URL = "https://sandboxapi.finnotech.ir"
CLIENT_ID = "test-client"


class Recorder:
    """httpx.MockTransport handler that records requests and replays a response."""

    def __init__(self, status_code: int = 200, json_data=None, text: str | None = None,
                 headers: dict[str, str] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.json_data = json_data if json_data is not None else {"status": "DONE", "result": {}}
        self.text = text
        self.headers = headers

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json_data)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        client_id=CLIENT_ID,
        client_secret="test-secret",
        nid="0012345678",
        environment="sandbox",
        timeout=5.0,
        token_store="./test-data/tokens.json",
    )


@pytest.fixture
def fake_environments() -> dict[str, EnvironmentProfile]:
    return {
        "sandbox": EnvironmentProfile(base_url=BASE_URL),
        "production": EnvironmentProfile(base_url="https://apibeta.finnotech.ir"),
    }


@pytest.fixture
def fake_config(fake_settings, fake_environments) -> Config:
    return Config(settings=fake_settings, environments=fake_environments)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder) -> FinnotechClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return FinnotechClient(BASE_URL, http=http)


@pytest.fixture
def store() -> MemoryTokenStore:
    """Store holding token 'tok-<scope>' / 'ref-<scope>' for every scope."""
    s = MemoryTokenStore()
    for scope in Scope:
        s._records[scope.scope_name] = TokenRecord(
            access_token=f"tok-{scope.scope_name}",
            refresh_token=f"ref-{scope.scope_name}",
            life_time=3600,
            scopes=[scope.scope_name],
            token_type=GrantType.CLIENT_CREDENTIALS,
        )
    return s


@pytest.fixture
def token_service(client, store) -> TokenService:
    return TokenService(CLIENT_ID, "test-secret", "0012345678", client, store)


@pytest.fixture
def oak(token_service, client) -> OakService:
    return OakService(token_service, client)
