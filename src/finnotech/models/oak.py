"""Request models for the oak service family."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, Field, field_validator


class IbanInquiryRequest(BaseModel):
    iban: str


class GroupIbanInquiryRequest(BaseModel):
    """CSV file of IBANs, as raw bytes or base64 text."""
    file: bytes | str

    def file_bytes(self) -> bytes:
        """Decode the file field to raw bytes.

        Line breaks and other whitespace in base64 text are ignored, so
        MIME-wrapped output is accepted; any other stray character is not.
        """
        if isinstance(self.file, bytes):
            return self.file
        try:
            return base64.b64decode("".join(self.file.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"file is not valid base64: {e}") from e


class GroupIbanInquiryRetryRequest(BaseModel):
    inquiry_track_id: str = Field(alias="inquiryTrackId")

    model_config = {"populate_by_name": True}


class GroupIbanInquiryResultRequest(BaseModel):
    inquiry_track_id: str = Field(alias="inquiryTrackId")

    model_config = {"populate_by_name": True}


class CardBalanceRequest(BaseModel):
    card: str


class CardStatementRequest(BaseModel):
    card: str
    # Jalali dates, YYMMDD
    from_date: str = Field(default="", alias="fromDate")
    to_date: str = Field(default="", alias="toDate")

    model_config = {"populate_by_name": True}

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _none_to_empty(cls, v: str | None) -> str:
        return v or ""


class DepositToIbanRequest(BaseModel):
    deposit: str
    bank: str  # bank code from the Finnotech bank list


class CifInquiryRequest(BaseModel):
    nid: str


class ShahabInquiryRequest(BaseModel):
    nid: str
    birth_date: str = Field(alias="birthDate")
    identity_number: str = Field(default="", alias="identityNumber")

    model_config = {"populate_by_name": True}

    @field_validator("identity_number", mode="before")
    @classmethod
    def _none_to_empty(cls, v: str | None) -> str:
        return v or ""
