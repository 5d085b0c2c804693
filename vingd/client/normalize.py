"""
Decoding of broker responses and normalization of broker records.
"""

from __future__ import annotations

import json
import logging
from decimal import ROUND_DOWN, Decimal
from http import HTTPStatus
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from vingd.common.dates import to_iso_date
from vingd.common.exceptions import BrokerConnectionError, BrokerError
from vingd.common.models import (
    RawVoucher,
    Transfer,
    TransferDescription,
    Urls,
    Voucher,
)

if TYPE_CHECKING:
    from vingd.client.http import TransportResponse

logger = logging.getLogger(__name__)

TRANSFER_CLASSNAMES = MappingProxyType(
    {
        1: "Purchase",
        2: "Ad reward",
        3: "Seller payout",
        4: "Ad deposit",
        5: "Currency exchange",
        6: "Direct transfer",
        7: "Refund",
        8: "Unverified purchase refund",
        9: "Voucher allocated",
        10: "Voucher deposited",
    }
)


def to_minor_units(amount: Any) -> int:
    """Convert a decimal amount (e.g. ``2.00``) to cents (``200``), truncating."""
    cents = Decimal(str(amount)) * 100
    return int(cents.to_integral_value(rounding=ROUND_DOWN))


def from_minor_units(cents: Any) -> Decimal:
    """Convert cents to a decimal amount."""
    return Decimal(int(cents)) / 100


def is_success(status: int) -> bool:
    return HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES


def decode_response(result: TransportResponse) -> Any:
    """Return the ``data`` of a successful response envelope.

    Raises:
        BrokerError: the broker reported a failure (``message``/``context``).
        BrokerConnectionError: the response is not a broker envelope.
    """
    try:
        body = json.loads(result.body) if result.body else None
    except ValueError:
        body = None

    if is_success(result.status):
        if isinstance(body, dict):
            return body.get("data")
        if not result.body.strip():
            return None
        msg = f"Invalid response from Vingd Broker (HTTP {result.status})"
        raise BrokerConnectionError(msg, result.status, result.message)

    if isinstance(body, dict) and "message" in body:
        raise BrokerError(body["message"], body.get("context"), result.status)

    msg = (
        "Failed to establish connection with Vingd Broker "
        f"(HTTP error {result.status}: {result.message})."
    )
    raise BrokerConnectionError(msg, result.status, result.message)


def unpack_batch_response(response: dict[str, Any], name: str = "id") -> int:
    """Extract an id from either a batch-style or a simplified response.

    Batch responses carry a list under the pluralized name (``ids``) and an
    optional ``errors`` list; simplified responses carry the bare field.
    """
    names = f"{name}s"
    try:
        if names in response:
            errors = response.get("errors") or []
            if errors:
                error = errors[0]
                if not isinstance(error, dict):
                    error = {"desc": str(error)}
                raise BrokerError(
                    error.get("desc", "Unknown error"),
                    "Batch error",
                    error.get("code", HTTPStatus.CONFLICT),
                )
            return int(response[names][0])
        return int(response[name])
    except (KeyError, IndexError, TypeError, ValueError) as err:
        msg = f"Missing '{name}' in Vingd Broker response"
        raise BrokerConnectionError(msg) from err


def normalize_voucher(raw: dict[str, Any], frontend: str) -> Voucher:
    """Convert a raw broker voucher into a ``Voucher``."""
    try:
        parsed = RawVoucher.model_validate(raw)
    except ValidationError as err:
        msg = f"Invalid voucher record from Vingd Broker: {err}"
        raise BrokerConnectionError(msg) from err

    code = parsed.vid_encoded
    return Voucher(
        amount=from_minor_units(parsed.amount_vouched),
        transfer_id=parsed.id_fort_transfer,
        description=parsed.description,
        message=parsed.message,
        until=to_iso_date(parsed.valid_until),
        code=code,
        gid=parsed.gid,
        urls=Urls(
            redirect=f"{frontend}/vouchers/{code}",
            popup=f"{frontend}/popup/vouchers/{code}",
        ),
        action=parsed.action,
        created=parsed.created,
    )


def normalize_voucher_list(
    vouchers: list[dict[str, Any]], frontend: str
) -> list[Voucher]:
    return [normalize_voucher(raw, frontend) for raw in vouchers or []]


def normalize_transfer(raw: dict[str, Any]) -> Transfer:
    """Scale the amount and decode the description of a raw transfer."""
    try:
        description = raw.get("description") or {}
        if isinstance(description, str):
            description = json.loads(description)
        desc = TransferDescription.model_validate(description)
        desc.classname = TRANSFER_CLASSNAMES.get(desc.class_)

        record = dict(raw)
        record["amount"] = from_minor_units(raw.get("amount", 0))
        record["description"] = desc
        transfer = Transfer.model_validate(record)
    except (ValidationError, TypeError, ValueError, AttributeError) as err:
        msg = f"Invalid transfer record from Vingd Broker: {err}"
        raise BrokerConnectionError(msg) from err

    if desc.class_ is not None and desc.classname is None:
        logger.debug("Unknown transfer class %s", desc.class_)
    return transfer
