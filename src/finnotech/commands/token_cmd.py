"""CLI commands for token management."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console

from finnotech.config import get_config
from finnotech.models.auth import TokenRecord
from finnotech.scopes import GrantType, Scope
from finnotech.sdk import Finnotech
from finnotech.token_store import FileTokenStore
from finnotech.utils.errors import FinnotechError, handle_error
from finnotech.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="token", help="Manage client-credentials tokens.")


def _build_sdk(env: str | None = None) -> tuple[Finnotech, FileTokenStore]:
    config = get_config()
    store = FileTokenStore(config.settings.token_store)
    return Finnotech.from_config(config, delegate=store, environment=env), store


def _summary(record: TokenRecord) -> dict[str, object]:
    """Token record without the secret values."""
    return {
        "token_type": record.token_type.value,
        "life_time": record.life_time,
        "scopes": ",".join(record.scopes),
    }


@app.command("client-credentials")
def client_credentials(
    scope: Annotated[list[str] | None, typer.Option("--scope", "-s", help="Scope name (repeatable). Default: all")] = None,
    env: Annotated[str | None, typer.Option("--env", "-e", help="Environment (sandbox, production)")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Request a client-credentials token and store it."""

    async def run(sdk: Finnotech, scopes: list[str]) -> TokenRecord:
        async with sdk:
            return await sdk.token.get_client_credential_token(scopes)

    try:
        if scope:
            scopes = [Scope.from_name(s).scope_name for s in scope]
        else:
            scopes = Scope.names(GrantType.CLIENT_CREDENTIALS)
        sdk, store = _build_sdk(env)
        console.print(f"Requesting token for [bold]{len(scopes)}[/bold] scope(s)...", style="yellow")
        record = asyncio.run(run(sdk, scopes))
        print_output(_summary(record), output, title="Token Issued")
        console.print(f"[dim]Saved to {store.path}[/dim]")
    except (FinnotechError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("refresh")
def refresh(
    scope: Annotated[str, typer.Option("--scope", "-s", help="Scope whose token to refresh")] = ...,
    env: Annotated[str | None, typer.Option("--env", "-e", help="Environment (sandbox, production)")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Refresh the stored token for a scope."""

    async def run(sdk: Finnotech, scope_name: str) -> TokenRecord:
        async with sdk:
            return await sdk.token.get_client_credentials_refresh_token(scope_name)

    try:
        scope_name = Scope.from_name(scope).scope_name
        sdk, _ = _build_sdk(env)
        console.print(f"Refreshing token for [bold]{scope_name}[/bold]...", style="yellow")
        record = asyncio.run(run(sdk, scope_name))
        print_output(_summary(record), output, title="Token Refreshed")
    except (FinnotechError, LookupError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("status")
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show which scopes have a stored token."""
    config = get_config()
    store = FileTokenStore(config.settings.token_store)

    rows = [
        {"scope": scope, "token_type": record.token_type.value, "life_time": record.life_time}
        for scope, record in sorted(store.records.items())
    ]
    if not rows:
        console.print("[dim]No tokens stored.[/dim]")
        raise typer.Exit(0)
    print_output(rows, output, title="Stored Tokens")
