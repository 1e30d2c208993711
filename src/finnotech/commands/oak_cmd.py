"""CLI commands for oak inquiries."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated, Any, Awaitable, Callable

import typer
from rich.console import Console

from finnotech.config import get_config
from finnotech.sdk import Finnotech
from finnotech.services.oak import OakService
from finnotech.token_store import FileTokenStore
from finnotech.utils.errors import FinnotechError, handle_error
from finnotech.utils.output import OutputFormat, print_output, result_rows

console = Console(stderr=True)
app = typer.Typer(name="oak", help="IBAN, card and identity inquiries.")

EnvOpt = Annotated[str | None, typer.Option("--env", "-e", help="Environment (sandbox, production)")]
TrackIdOpt = Annotated[str | None, typer.Option("--track-id", help="Tracking code (generated if omitted)")]
OutputOpt = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]


def _build_sdk(env: str | None = None) -> Finnotech:
    config = get_config()
    store = FileTokenStore(config.settings.token_store)
    return Finnotech.from_config(config, delegate=store, environment=env)


def _run(
    env: str | None,
    call: Callable[[OakService], Awaitable[Any]],
) -> Any:
    """Run one oak call inside a fresh SDK session; exit 1 on failure."""

    async def run(sdk: Finnotech) -> Any:
        async with sdk:
            return await call(sdk.oak)

    try:
        return asyncio.run(run(_build_sdk(env)))
    except (FinnotechError, LookupError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


def _show(body: Any, output: OutputFormat, title: str) -> None:
    if output == OutputFormat.JSON:
        print_output(body, output)
    else:
        print_output(result_rows(body), output, title=title)


@app.command("iban-inquiry")
def iban_inquiry(
    iban: Annotated[str, typer.Option("--iban", help="IBAN, e.g. IR...")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Look up the owner and status of an IBAN."""
    body = _run(env, lambda oak: oak.iban_inquiry({"iban": iban}, track_id))
    _show(body, output, "IBAN Inquiry")


@app.command("card-balance")
def card_balance(
    card: Annotated[str, typer.Option("--card", help="Card number")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Get the balance of a card."""
    body = _run(env, lambda oak: oak.card_balance({"card": card}, track_id))
    _show(body, output, "Card Balance")


@app.command("card-statement")
def card_statement(
    card: Annotated[str, typer.Option("--card", help="Card number")] = ...,
    from_date: Annotated[str | None, typer.Option("--from-date", help="Start date (Jalali YYMMDD)")] = None,
    to_date: Annotated[str | None, typer.Option("--to-date", help="End date (Jalali YYMMDD)")] = None,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """List a card's transactions."""
    data = {"card": card, "from_date": from_date, "to_date": to_date}
    body = _run(env, lambda oak: oak.card_statement(data, track_id))
    _show(body, output, "Card Statement")


@app.command("deposit-to-iban")
def deposit_to_iban(
    deposit: Annotated[str, typer.Option("--deposit", help="Deposit (account) number")] = ...,
    bank: Annotated[str, typer.Option("--bank", help="Bank code")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Convert a deposit number to its IBAN."""
    body = _run(env, lambda oak: oak.deposit_to_iban({"deposit": deposit, "bank": bank}, track_id))
    _show(body, output, "Deposit to IBAN")


@app.command("cif-inquiry")
def cif_inquiry(
    nid: Annotated[str, typer.Option("--nid", help="National ID")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Look up the customer information file of a national ID."""
    body = _run(env, lambda oak: oak.cif_inquiry({"nid": nid}, track_id))
    _show(body, output, "CIF Inquiry")


@app.command("shahab-inquiry")
def shahab_inquiry(
    nid: Annotated[str, typer.Option("--nid", help="National ID")] = ...,
    birth_date: Annotated[str, typer.Option("--birth-date", help="Birth date (Jalali)")] = ...,
    identity_number: Annotated[str | None, typer.Option("--identity-number", help="Birth certificate number")] = None,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Look up the Shahab code of a person."""
    data = {"nid": nid, "birth_date": birth_date, "identity_number": identity_number}
    body = _run(env, lambda oak: oak.shahab_inquiry(data, track_id))
    _show(body, output, "Shahab Inquiry")


@app.command("group-submit")
def group_submit(
    file: Annotated[Path, typer.Option("--file", "-f", help="CSV file of IBANs", exists=True, dir_okay=False)] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Submit a CSV of IBANs for batch inquiry."""
    content = file.read_bytes()
    body = _run(env, lambda oak: oak.submit_group_iban_inquiry({"file": content}, track_id))
    _show(body, output, "Group IBAN Inquiry")


@app.command("group-retry")
def group_retry(
    inquiry_track_id: Annotated[str, typer.Option("--inquiry-track-id", help="Track ID of the original submission")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
) -> None:
    """Retry a batch inquiry."""
    body = _run(
        env,
        lambda oak: oak.retry_group_iban_inquiry({"inquiry_track_id": inquiry_track_id}, track_id),
    )
    _show(body, output, "Group IBAN Inquiry Retry")


@app.command("group-result")
def group_result(
    inquiry_track_id: Annotated[str, typer.Option("--inquiry-track-id", help="Track ID of the submission")] = ...,
    env: EnvOpt = None,
    track_id: TrackIdOpt = None,
) -> None:
    """Download the CSV result of a batch inquiry to stdout."""
    body = _run(
        env,
        lambda oak: oak.get_group_iban_inquiry_result({"inquiry_track_id": inquiry_track_id}, track_id),
    )
    sys.stdout.write(body if isinstance(body, str) else str(body))
