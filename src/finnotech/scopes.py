"""Scope registry for Finnotech services.

Every operation the SDK exposes is bound to exactly one member of ``Scope``,
so an unregistered scope can never reach the HTTP layer.
"""

from __future__ import annotations

from enum import Enum


class GrantType(str, Enum):
    """OAuth2 grant a scope's token is issued under."""
    CLIENT_CREDENTIALS = "client_credentials"
    AUTHORIZATION_CODE = "authorization_code"
    SMS = ""


class Scope(Enum):
    """Closed set of scopes, valued as (wire name, grant type)."""

    IBAN_INQUIRY = ("oak:iban-inquiry:get", GrantType.CLIENT_CREDENTIALS)
    GROUP_IBAN_INQUIRY_POST = ("oak:group-iban-inquiry:post", GrantType.CLIENT_CREDENTIALS)
    GROUP_IBAN_INQUIRY_GET = ("oak:group-iban-inquiry:get", GrantType.CLIENT_CREDENTIALS)
    # The remote API names this scope ":get" although the call is a POST
    CARD_BALANCE = ("oak:card-balance:get", GrantType.CLIENT_CREDENTIALS)
    CARD_STATEMENT = ("oak:card-statement:get", GrantType.CLIENT_CREDENTIALS)
    DEPOSIT_TO_IBAN = ("oak:deposit-to-iban:get", GrantType.CLIENT_CREDENTIALS)
    CIF_INQUIRY = ("oak:cif-inquiry:get", GrantType.CLIENT_CREDENTIALS)
    SHAHAB_INQUIRY = ("oak:shahab-inquiry:get", GrantType.CLIENT_CREDENTIALS)

    @property
    def scope_name(self) -> str:
        return self.value[0]

    @property
    def auth_mode(self) -> GrantType:
        return self.value[1]

    @classmethod
    def names(cls, auth_mode: GrantType | None = None) -> list[str]:
        """Wire names of all scopes, optionally filtered by grant type."""
        return [
            scope.scope_name
            for scope in cls
            if auth_mode is None or scope.auth_mode == auth_mode
        ]

    @classmethod
    def from_name(cls, name: str) -> Scope:
        """Look up a scope by its wire name."""
        for scope in cls:
            if scope.scope_name == name:
                return scope
        available = ", ".join(cls.names())
        raise ValueError(f"Unknown scope '{name}'. Available: {available}")
