"""Exception types raised by the SDK, and structured error output for the CLI."""

from __future__ import annotations

import json
import sys

import httpx
from rich.console import Console

console = Console(stderr=True)


class FinnotechError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class MissingDelegateError(FinnotechError):
    """A token delegate operation the SDK needs was not supplied."""


class InvalidArgumentError(FinnotechError):
    """An argument was rejected before any request was made."""


class UnexpectedResponseError(FinnotechError):
    """A 2xx response whose body does not have the expected shape."""


class TransportError(FinnotechError):
    """An HTTP or network failure, wrapping the httpx exception unaltered."""

    def __init__(self, operation: str, cause: httpx.HTTPError) -> None:
        super().__init__(operation, str(cause))
        self.cause = cause
        self.response: httpx.Response | None = None
        self.status_code: int | None = None
        if isinstance(cause, httpx.HTTPStatusError):
            self.response = cause.response
            self.status_code = cause.response.status_code


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("401", "Token may be expired: run `finnotech token refresh --scope <scope>`"),
    ("unauthorized", "Token may be expired: run `finnotech token refresh --scope <scope>`"),
    ("no token stored", "Request a token first: run `finnotech token client-credentials`"),
    ("403", "Client lacks this scope: check the scopes enabled for your client on Finnotech"),
    ("429", "Rate limited: wait a moment and retry"),
    ("timeout", "Request timed out: try again or raise FINNOTECH_TIMEOUT"),
    ("timed out", "Request timed out: try again or raise FINNOTECH_TIMEOUT"),
    ("connection", "Connection error: check network connectivity"),
    ("unknown environment", "Environment not configured: check config/environments.yaml"),
    ("unknown scope", "Scope names look like oak:iban-inquiry:get; the error lists the available ones"),
    ("scopes should not be empty", "Pass at least one --scope"),
    ("base64", "File content must be raw bytes or valid base64 text"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    """Classify an error for structured output."""
    if isinstance(error, MissingDelegateError):
        return "MISSING_DELEGATE"
    if isinstance(error, (InvalidArgumentError, ValueError)):
        return "INVALID_ARGUMENT"
    if isinstance(error, UnexpectedResponseError):
        return "UNEXPECTED_RESPONSE"
    if isinstance(error, TransportError):
        if isinstance(error.cause, httpx.TimeoutException):
            return "TIMEOUT"
        if isinstance(error.cause, httpx.ConnectError):
            return "CONNECTION_ERROR"
        status = error.status_code or 0
        if status == 401:
            return "AUTH_ERROR"
        if status == 403:
            return "FORBIDDEN"
        if status == 429:
            return "RATE_LIMITED"
        if 500 <= status < 600:
            return "SERVER_ERROR"
        return "TRANSPORT_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for script consumption:
    {"error": true, "code": "AUTH_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _get_code(error),
        "message": message,
    }
    if isinstance(error, TransportError) and error.status_code is not None:
        error_obj["status_code"] = error.status_code
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
