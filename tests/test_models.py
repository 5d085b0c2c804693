import pytest
from pydantic import ValidationError

from vingd.common.models import (
    ClientConfig,
    ObjectDescription,
    Order,
    OrderObject,
    Purchase,
    RawVoucher,
    TransferDescription,
    Urls,
)


def test_object_description_model() -> None:
    description = ObjectDescription(name="Article", url="https://s.test/a", lang="en")
    assert description.model_dump() == {
        "name": "Article",
        "url": "https://s.test/a",
        "lang": "en",
    }


def test_object_description_requires_name_and_url() -> None:
    with pytest.raises(ValidationError):
        ObjectDescription(name="Article")  # type: ignore[call-arg]


def test_object_description_size_limit() -> None:
    with pytest.raises(ValidationError, match="too large"):
        ObjectDescription(name="A", url="https://s.test", notes="x" * 4096)


def test_order_model() -> None:
    order = Order(
        id=17,
        expires="2026-10-19T12:15:00+00:00",
        object=OrderObject(id=42, price=200),
        urls=Urls(redirect="r", popup="p"),
    )
    assert order.context is None
    assert order.object.price == 200  # noqa: PLR2004


def test_purchase_model_aliases() -> None:
    purchase = Purchase.model_validate(
        {"huid": "ab", "purchaseid": 5, "transferid": 9, "extra": "kept"}
    )
    assert purchase.purchase_id == 5  # noqa: PLR2004
    assert purchase.transfer_id == 9  # noqa: PLR2004
    assert purchase.model_extra == {"extra": "kept"}
    assert Purchase(purchase_id=5, transfer_id=9) == Purchase(purchaseid=5, transferid=9)


def test_raw_voucher_field_layouts() -> None:
    prefixed = RawVoucher.model_validate(
        {"amount_vouched": 1, "vid_encoded": "x", "ts_valid_until": "u", "ts_created": "c"}
    )
    bare = RawVoucher.model_validate(
        {"amount_vouched": 1, "vid_encoded": "x", "valid_until": "u", "created": "c"}
    )
    assert prefixed == bare
    assert bare.valid_until == "u"
    assert bare.created == "c"


def test_transfer_description_class_alias() -> None:
    description = TransferDescription.model_validate({"class": 3, "count": 2})
    assert description.class_ == 3  # noqa: PLR2004
    assert description.model_dump(by_alias=True) == {
        "class": 3,
        "classname": None,
        "count": 2,
    }


def test_client_config_transport_overrides() -> None:
    config = ClientConfig(environment="sandbox", read_timeout=2.5)
    assert config.transport_overrides() == {
        "connect_timeout": None,
        "read_timeout": 2.5,
        "max_redirects": None,
        "verify_ssl": None,
        "user_agent": None,
    }
