"""Oak service: account, card and identity inquiries."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from finnotech.auth import TokenService
from finnotech.client import FinnotechClient, unwrap
from finnotech.models.oak import (
    CardBalanceRequest,
    CardStatementRequest,
    CifInquiryRequest,
    DepositToIbanRequest,
    GroupIbanInquiryRequest,
    GroupIbanInquiryResultRequest,
    GroupIbanInquiryRetryRequest,
    IbanInquiryRequest,
    ShahabInquiryRequest,
)
from finnotech.scopes import Scope
from finnotech.utils.errors import InvalidArgumentError
from finnotech.utils.track_id import resolve_track_id

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

GROUP_FILE_FIELD = "ibansFile"
GROUP_FILE_NAME = "ibans.csv"


def _coerce(model: type[M], data: M | dict[str, Any], operation: str) -> M:
    """Accept a request model or plain data validated into one."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidArgumentError(operation, str(e)) from e


class OakService:
    """Service for the oak family of Finnotech endpoints.

    Every method resolves its scope, fetches an access token through the
    token service, makes exactly one request and returns the body as-is.
    """

    def __init__(self, token_service: TokenService, client: FinnotechClient) -> None:
        self._tokens = token_service
        self._client = client

    def _path(self, suffix: str) -> str:
        return f"/oak/v2/clients/{self._tokens.client_id}/{suffix}"

    async def _headers(self, scope: Scope) -> dict[str, str]:
        token = await self._tokens.get_access_token(scope.scope_name)
        return {
            "Authorization": f"Bearer {token}",
            "X-Scope-Name": scope.scope_name,
        }

    async def _call(
        self,
        method: str,
        scope: Scope,
        suffix: str,
        track_id: str | None,
        params: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> Any:
        path = self._path(suffix)
        logger.debug(f"{scope.scope_name}: {method} {path}")
        query = {**(params or {}), "trackId": resolve_track_id(track_id)}
        headers = await self._headers(scope)
        response = await self._client.request(
            method, path, params=query, headers=headers, **kwargs,
        )
        return unwrap(response)

    async def iban_inquiry(
        self, data: IbanInquiryRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Look up the owner and status of an IBAN."""
        req = _coerce(IbanInquiryRequest, data, "iban_inquiry")
        return await self._call(
            "GET", Scope.IBAN_INQUIRY, "ibanInquiry", track_id,
            params={"iban": req.iban},
        )

    async def submit_group_iban_inquiry(
        self, data: GroupIbanInquiryRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Submit a CSV of IBANs for batch inquiry.

        The file may be raw bytes or base64 text; both are sent as the same
        ``ibansFile`` multipart part.
        """
        req = _coerce(GroupIbanInquiryRequest, data, "submit_group_iban_inquiry")
        try:
            content = req.file_bytes()
        except ValueError as e:
            raise InvalidArgumentError("submit_group_iban_inquiry", str(e)) from e

        files = {GROUP_FILE_FIELD: (GROUP_FILE_NAME, content, "text/csv")}
        return await self._call(
            "POST", Scope.GROUP_IBAN_INQUIRY_POST, "groupIbanInquiry", track_id,
            files=files,
        )

    async def retry_group_iban_inquiry(
        self, data: GroupIbanInquiryRetryRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Ask Finnotech to re-run a previously submitted batch inquiry."""
        req = _coerce(GroupIbanInquiryRetryRequest, data, "retry_group_iban_inquiry")
        # Filename-less parts are plain multipart form fields
        files = {
            "retry": (None, "true"),
            "inquiryTrackId": (None, req.inquiry_track_id),
        }
        return await self._call(
            "POST", Scope.GROUP_IBAN_INQUIRY_POST, "groupIbanInquiry", track_id,
            files=files,
        )

    async def get_group_iban_inquiry_result(
        self, data: GroupIbanInquiryResultRequest | dict[str, Any], track_id: str | None = None,
    ) -> str:
        """Fetch the result of a batch inquiry. Returns CSV content."""
        req = _coerce(GroupIbanInquiryResultRequest, data, "get_group_iban_inquiry_result")
        return await self._call(
            "GET", Scope.GROUP_IBAN_INQUIRY_GET, "groupIbanInquiry", track_id,
            params={"inquiryTrackId": req.inquiry_track_id},
        )

    async def card_balance(
        self, data: CardBalanceRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Get the balance of a card."""
        req = _coerce(CardBalanceRequest, data, "card_balance")
        return await self._call(
            "POST", Scope.CARD_BALANCE, "card/balance", track_id,
            json={"card": req.card},
        )

    async def card_statement(
        self, data: CardStatementRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Get a card's transactions between two Jalali dates (YYMMDD)."""
        req = _coerce(CardStatementRequest, data, "card_statement")
        return await self._call(
            "POST", Scope.CARD_STATEMENT, "card/statement", track_id,
            json=req.model_dump(by_alias=True),
        )

    async def deposit_to_iban(
        self, data: DepositToIbanRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Convert a bank deposit number to its IBAN."""
        req = _coerce(DepositToIbanRequest, data, "deposit_to_iban")
        return await self._call(
            "GET", Scope.DEPOSIT_TO_IBAN, "iban", track_id,
            params={"bank": req.bank, "deposit": req.deposit},
        )

    async def cif_inquiry(
        self, data: CifInquiryRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Look up the customer information file of a national ID."""
        req = _coerce(CifInquiryRequest, data, "cif_inquiry")
        return await self._call(
            "GET", Scope.CIF_INQUIRY, f"users/{req.nid}/cifInquiry", track_id,
        )

    async def shahab_inquiry(
        self, data: ShahabInquiryRequest | dict[str, Any], track_id: str | None = None,
    ) -> dict[str, Any]:
        """Look up the Shahab code of a person."""
        req = _coerce(ShahabInquiryRequest, data, "shahab_inquiry")
        return await self._call(
            "GET", Scope.SHAHAB_INQUIRY, f"users/{req.nid}/shahabInquiry", track_id,
            params={"birthDate": req.birth_date, "identityNo": req.identity_number},
        )
