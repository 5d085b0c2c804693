"""
Pydantic models for broker payloads and client-facing records.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from vingd.common.config import Config


class ObjectDescription(BaseModel):
    """Description of a sellable object, as stored in the object registry."""

    model_config = ConfigDict(extra="allow")

    name: str
    url: str

    @model_validator(mode="after")
    def check_size(self) -> ObjectDescription:
        limit = Config().MAX_OBJECT_DESCRIPTION_SIZE
        size = len(self.model_dump_json().encode())
        if size > limit:
            msg = f"Object description too large ({size} > {limit} bytes)"
            raise ValueError(msg)
        return self


class Urls(BaseModel):
    redirect: str
    popup: str


class OrderObject(BaseModel):
    id: int
    price: int  # minor units


class Order(BaseModel):
    id: int
    expires: str | None
    context: str | None = None
    object: OrderObject
    urls: Urls


class Purchase(BaseModel):
    """Verified purchase, as returned by token verification."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    huid: str | None = None
    purchase_id: int = Field(alias="purchaseid")
    transfer_id: int = Field(alias="transferid")
    object: str | None = None
    context: str | None = None


class RawVoucher(BaseModel):
    """Voucher as sent by the broker (both historical field layouts)."""

    model_config = ConfigDict(extra="ignore")

    amount_vouched: int = Field(
        validation_alias=AliasChoices("amount_vouched", "amount")
    )
    id_fort_transfer: int | None = Field(
        default=None, validation_alias=AliasChoices("id_fort_transfer", "transfer_id")
    )
    description: str | None = None
    message: str | None = None
    valid_until: str | None = Field(
        default=None, validation_alias=AliasChoices("ts_valid_until", "valid_until")
    )
    vid_encoded: str = Field(validation_alias=AliasChoices("vid_encoded", "code"))
    gid: str | None = None
    action: str | None = None
    created: str | None = Field(
        default=None, validation_alias=AliasChoices("ts_created", "created")
    )


class Voucher(BaseModel):
    amount: Decimal
    transfer_id: int | None
    description: str | None
    message: str | None
    until: str | None
    code: str
    gid: str | None
    urls: Urls
    action: str | None = None
    created: str | None = None


class TransferDescription(BaseModel):
    """Decoded transfer description; always carries the transfer class."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_: int | None = Field(default=None, alias="class")
    classname: str | None = None


class Transfer(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    amount: Decimal
    uid_from: int | None = None
    uid_to: int | None = None
    uid_proxy: int | None = None
    timestamp: str | None = None
    description: TransferDescription


class ClientConfig(BaseModel):
    endpoint: str | None = None
    frontend: str | None = None
    environment: str | None = None
    log_level: int | str | None = None
    connect_timeout: float | None = None
    read_timeout: float | None = None
    max_redirects: int | None = None
    verify_ssl: bool | None = None
    user_agent: str | None = None

    def transport_overrides(self) -> dict[str, Any]:
        return self.model_dump(
            include={
                "connect_timeout",
                "read_timeout",
                "max_redirects",
                "verify_ssl",
                "user_agent",
            }
        )
