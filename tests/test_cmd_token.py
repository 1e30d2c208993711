"""CLI tests for token command group."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from typer.testing import CliRunner

from finnotech.commands.token_cmd import app
from finnotech.models.auth import TokenRecord
from finnotech.scopes import GrantType, Scope
from finnotech.utils.errors import TransportError

runner = CliRunner()


def _record(scopes) -> TokenRecord:
    return TokenRecord(
        access_token="secret-access",
        refresh_token="secret-refresh",
        life_time=864000,
        scopes=list(scopes),
        token_type=GrantType.CLIENT_CREDENTIALS,
    )


def _mock_sdk():
    sdk = MagicMock()
    sdk.token.get_client_credential_token = AsyncMock()
    sdk.token.get_client_credentials_refresh_token = AsyncMock()
    store = MagicMock()
    store.path = "tokens.json"
    return sdk, store


# ── client-credentials ───────────────────────────────────────────────

def test_client_credentials_defaults_to_all_scopes():
    sdk, store = _mock_sdk()
    sdk.token.get_client_credential_token.return_value = _record(Scope.names())

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, ["client-credentials", "--output", "json"])
    assert result.exit_code == 0
    sdk.token.get_client_credential_token.assert_awaited_once_with(Scope.names())


def test_client_credentials_explicit_scopes_hide_secrets():
    sdk, store = _mock_sdk()
    sdk.token.get_client_credential_token.return_value = _record(["oak:iban-inquiry:get"])

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, [
            "client-credentials", "--scope", "oak:iban-inquiry:get", "--output", "json",
        ])
    assert result.exit_code == 0
    sdk.token.get_client_credential_token.assert_awaited_once_with(["oak:iban-inquiry:get"])
    assert "secret-access" not in result.stdout
    assert "oak:iban-inquiry:get" in result.stdout


def test_client_credentials_transport_failure():
    sdk, store = _mock_sdk()
    sdk.token.get_client_credential_token.side_effect = TransportError(
        "POST /dev/v2/oauth2/token", httpx.ConnectError("refused"),
    )

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, ["client-credentials"])
    assert result.exit_code == 1
    assert '"CONNECTION_ERROR"' in result.stdout


# ── refresh ──────────────────────────────────────────────────────────

def test_refresh_calls_service():
    sdk, store = _mock_sdk()
    sdk.token.get_client_credentials_refresh_token.return_value = _record(["oak:iban-inquiry:get"])

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, ["refresh", "--scope", "oak:iban-inquiry:get", "--output", "json"])
    assert result.exit_code == 0
    sdk.token.get_client_credentials_refresh_token.assert_awaited_once_with("oak:iban-inquiry:get")


def test_refresh_without_stored_token():
    sdk, store = _mock_sdk()
    sdk.token.get_client_credentials_refresh_token.side_effect = LookupError("No token stored for scope 'oak:iban-inquiry:get'")

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, ["refresh", "--scope", "oak:iban-inquiry:get"])
    assert result.exit_code == 1


# ── status ───────────────────────────────────────────────────────────

def test_status_lists_stored_scopes(fake_config, tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({
        "s1": _record(["s1"]).model_dump(mode="json"),
    }))
    fake_config.settings.token_store = str(path)

    with patch("finnotech.commands.token_cmd.get_config", return_value=fake_config):
        result = runner.invoke(app, ["status", "--output", "json"])
    assert result.exit_code == 0
    rows = json.loads(result.stdout)
    assert rows == [{"scope": "s1", "token_type": "client_credentials", "life_time": 864000}]


def test_status_empty(fake_config, tmp_path):
    fake_config.settings.token_store = str(tmp_path / "none.json")

    with patch("finnotech.commands.token_cmd.get_config", return_value=fake_config):
        result = runner.invoke(app, ["status"])
    assert result.exit_code == 0


# ── argument checks ──────────────────────────────────────────────────

def test_refresh_unknown_scope_makes_no_call():
    sdk, store = _mock_sdk()

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, ["refresh", "--scope", "oak:nope"])
    assert result.exit_code == 1
    data = json.loads(result.stdout.splitlines()[0])
    assert data["code"] == "INVALID_ARGUMENT"
    assert "Unknown scope 'oak:nope'" in data["message"]
    sdk.token.get_client_credentials_refresh_token.assert_not_awaited()


def test_client_credentials_unknown_scope_makes_no_call():
    sdk, store = _mock_sdk()

    with patch("finnotech.commands.token_cmd._build_sdk", return_value=(sdk, store)):
        result = runner.invoke(app, [
            "client-credentials", "--scope", "oak:iban-inquiry:get", "--scope", "oak:nope",
        ])
    assert result.exit_code == 1
    sdk.token.get_client_credential_token.assert_not_awaited()


def test_client_credentials_unknown_environment(fake_config, tmp_path):
    fake_config.settings.token_store = str(tmp_path / "tokens.json")

    with patch("finnotech.commands.token_cmd.get_config", return_value=fake_config):
        result = runner.invoke(app, ["client-credentials", "--env", "bogus"])
    assert result.exit_code == 1
    data = json.loads(result.stdout.splitlines()[0])
    assert data["code"] == "INVALID_ARGUMENT"
    assert "environments.yaml" in data["hint"]
