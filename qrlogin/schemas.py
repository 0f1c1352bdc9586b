"""Pydantic models for login attempts and the payloads exchanged with callers."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def is_confirmed(doc: dict) -> bool:
    """A login document is confirmed once it carries both a user and a confirmation time."""
    return bool(doc.get("user")) and doc.get("confirmedAt") is not None


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginAttempt(CamelModel):
    """One QR login challenge, from issuance to confirmation."""

    api_key: str = Field(alias="apiKey")
    login_token: str = Field(alias="loginToken", description="Opaque token, also the document key")
    created_at: datetime = Field(alias="createdAt")
    user: str | None = None
    confirmed_at: datetime | None = Field(default=None, alias="confirmedAt")

    @property
    def is_confirmed(self) -> bool:
        return is_confirmed(self.to_document())

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ConfirmationState(CamelModel):
    """The two fields of a login snapshot that decide confirmation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user: str | None = None
    confirmed_at: datetime | None = Field(default=None, alias="confirmedAt")


class ChallengeReq(CamelModel):
    # Left untyped so a non-string key is rejected as invalid-argument by the issuer
    api_key: Any = Field(default=None, alias="apiKey")


class ChallengePayload(CamelModel):
    qr_code: str = Field(alias="qrCode")
    login_token: str = Field(alias="loginToken")


class ChallengeResponse(CamelModel):
    status: Literal["SUCCESS"] = "SUCCESS"
    message: str
    payload: ChallengePayload


class ConfirmationPayload(CamelModel):
    user_id: str = Field(alias="userId")
    confirmed_at: datetime = Field(alias="confirmedAt")


class WatchResult(CamelModel):
    status: Literal["SUCCESS", "PENDING"]
    message: str
    login_token: str = Field(alias="loginToken")
    payload: ConfirmationPayload | None = None

    @property
    def confirmed(self) -> bool:
        return self.status == "SUCCESS"


class LoginUpdatedReq(CamelModel):
    login_token: str = Field(alias="loginToken")
    data: Any = None


class ConfirmReq(CamelModel):
    login_token: str = Field(alias="loginToken")
    user: str


class LoginStatusResp(CamelModel):
    status: Literal["PENDING", "CONFIRMED"]
    user_id: str | None = Field(default=None, alias="userId")
    confirmed_at: datetime | None = Field(default=None, alias="confirmedAt")
