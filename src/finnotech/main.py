"""Finnotech CLI entry point."""

from __future__ import annotations

import logging

import typer

from finnotech.commands.oak_cmd import app as oak_app
from finnotech.commands.token_cmd import app as token_app

app = typer.Typer(
    name="finnotech",
    help="Command-line client for the Finnotech banking API.",
    no_args_is_help=True,
)

app.add_typer(token_app, name="token")
app.add_typer(oak_app, name="oak")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Finnotech CLI: request tokens and run inquiries."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
