"""
Vingd Broker API client.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from vingd.client.http import HttpTransport
from vingd.client.normalize import (
    decode_response,
    from_minor_units,
    normalize_transfer,
    normalize_voucher,
    normalize_voucher_list,
    to_minor_units,
    unpack_batch_response,
)
from vingd.common import setup_logger
from vingd.common.config import Config
from vingd.common.crypto import CryptoUtils
from vingd.common.dates import build_url, to_iso_basic_date, to_iso_date
from vingd.common.exceptions import (
    BrokerConnectionError,
    BrokerError,
    InvalidTokenError,
    TransportError,
)
from vingd.common.models import (
    ClientConfig,
    ObjectDescription,
    Order,
    OrderObject,
    Purchase,
    Transfer,
    Urls,
    Voucher,
)
from vingd.common.safeformat import safeformat

if TYPE_CHECKING:
    from decimal import Decimal

ModelT = TypeVar("ModelT", bound=BaseModel)

# Backslash escapes added when a token passes through a quoted query value
ESCAPE_RE = re.compile(r"\\(.?)", re.DOTALL)


class VingdClient:
    """Client for the Vingd Broker (backend) and user frontend."""

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        endpoint: str | None = None,
        frontend: str | None = None,
        client_config: ClientConfig | None = None,
        transport: HttpTransport | None = None,
    ):
        self.config = Config()
        self.client_config = client_config or ClientConfig()

        self.logger = logging.getLogger(__name__)
        log_level = self.client_config.log_level
        setup_logger(
            logging.getLogger("vingd"),
            log_level if log_level is not None else self.config.LOG_LEVEL,
            self.config.LOG_FORMAT,
        )

        self.transport = transport or HttpTransport(
            **self.client_config.transport_overrides()
        )
        self.init(username, password, endpoint, frontend)

    @classmethod
    def sandbox(cls, username: str, password: str, **kwargs: Any) -> VingdClient:
        """Client bound to the sandbox environment."""
        return cls(
            username,
            password,
            client_config=ClientConfig(environment="sandbox"),
            **kwargs,
        )

    def init(
        self,
        username: str | None,
        password: str | None,
        endpoint: str | None = None,
        frontend: str | None = None,
    ) -> None:
        """(Re-)initialize credentials and broker/frontend URLs.

        Only a hash of ``password`` is kept. On re-initialization, URLs
        that are not given keep their current values.
        """
        username = username or self.config.USERNAME
        password = password or self.config.PASSWORD
        if not username or not password:
            msg = "Vingd username and password are required"
            raise ValueError(msg)

        if hasattr(self, "_endpoint"):
            default_endpoint, default_frontend = self._endpoint, self._frontend
        else:
            if self.client_config.environment:
                env_endpoint, env_frontend = Config.environment(
                    self.client_config.environment
                )
            else:
                env_endpoint, env_frontend = self.config.ENDPOINT, self.config.FRONTEND
            default_endpoint = self.client_config.endpoint or env_endpoint
            default_frontend = self.client_config.frontend or env_frontend

        self._api_key = username
        self._api_secret = CryptoUtils.hash_secret(password)
        self._endpoint = (endpoint or default_endpoint).rstrip("/")
        self._frontend = (frontend or default_frontend).rstrip("/")

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def frontend(self) -> str:
        return self._frontend

    def _request(self, verb: str, resource: str, data: Any = None) -> Any:
        """Issue a request to the broker and return the ``data`` it responded with."""
        body = json.dumps(data) if data is not None else None
        headers = {"Content-Type": "application/json"} if body is not None else {}

        self.logger.debug("%s %s", verb, resource)
        try:
            result = self.transport.send(
                self._endpoint + resource,
                verb,
                headers=headers,
                body=body,
                auth=(self._api_key, self._api_secret),
            )
        except TransportError as err:
            self.logger.error("Connection to Vingd Broker failed: %s", err)
            msg = f"Failed to establish connection with Vingd Broker: {err}."
            raise BrokerConnectionError(msg) from err

        self.logger.debug("%s %s -> %s", verb, resource, result.status)
        try:
            return decode_response(result)
        except BrokerError as err:
            self.logger.warning("%s %s failed: %s", verb, resource, err)
            raise

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as err:
            msg = f"Unexpected {model.__name__} data from Vingd Broker: {err}"
            raise BrokerConnectionError(msg) from err

    # Object registry

    def create_object(self, name: str, url: str, **metadata: Any) -> int:
        """Register an object in the Vingd Object Registry.

        Args:
            name: Object's name
            url: Object's callback URL
            **metadata: Additional description fields

        Returns:
            Object ID assigned by the broker
        """
        description = ObjectDescription(name=name, url=url, **metadata)
        ret = self._request(
            "POST", "/registry/objects/", {"description": description.model_dump()}
        )
        return unpack_batch_response(ret, "oid")

    def update_object(self, oid: int, name: str, url: str, **metadata: Any) -> int:
        """Update an object registered in the Vingd Object Registry."""
        description = ObjectDescription(name=name, url=url, **metadata)
        ret = self._request(
            "PUT",
            safeformat("/registry/objects/{:int}/", oid),
            {"description": description.model_dump()},
        )
        return unpack_batch_response(ret, "oid")

    def get_object(self, oid: int) -> dict[str, Any]:
        return self._request("GET", safeformat("/registry/objects/{:int}/", oid))

    def get_objects(self) -> list[dict[str, Any]]:
        return self._request("GET", "/registry/objects/")

    # Orders and purchases

    def create_order(
        self,
        oid: int,
        price: Decimal | float | str,
        context: str | None = None,
        expires: Any = None,
    ) -> Order:
        """Create an order for object ``oid`` at ``price``.

        Args:
            oid: Object ID (see ``create_object``)
            price: Price in vingds, truncated to two decimals
            context: Arbitrary context handle, returned on token verification
            expires: Expiry timestamp or validity period (default: 15 minutes)

        Returns:
            Order with redirect/popup URLs for the user frontend
        """
        minor_price = to_minor_units(price)
        data = {
            "price": minor_price,
            "order_expires": to_iso_basic_date(expires, self.config.EXP_ORDER),
            "context": context,
        }
        ret = self._request("POST", safeformat("/objects/{:int}/orders", oid), data)
        order_id = unpack_batch_response(ret)
        return Order(
            id=order_id,
            expires=to_iso_date(expires, self.config.EXP_ORDER),
            context=context,
            object=OrderObject(id=oid, price=minor_price),
            urls=Urls(
                redirect=build_url(f"{self._frontend}/orders/{order_id}/add/"),
                popup=build_url(f"{self._frontend}/popup/orders/{order_id}/add/"),
            ),
        )

    def verify_purchase(self, token: str | bytes | dict[str, Any]) -> Purchase:
        """Verify a purchase token the user brought back from the frontend.

        ``token`` is either the JSON string from the callback URL or its
        decoded dictionary (with ``oid`` and ``tid`` keys). Backslash escapes
        are stripped from a string token before it is decoded.

        Raises:
            InvalidTokenError: the token is malformed (no request is made)
            BrokerError: the broker rejected the token
        """
        if isinstance(token, bytes):
            token = token.decode(errors="replace")
        if isinstance(token, str):
            try:
                token = json.loads(ESCAPE_RE.sub(r"\1", token))
            except ValueError as err:
                msg = "Invalid token format."
                raise InvalidTokenError(msg) from err
        if not isinstance(token, dict):
            msg = "Invalid token format."
            raise InvalidTokenError(msg)
        oid = token.get("oid")
        if not oid:
            msg = "Invalid object identifier."
            raise InvalidTokenError(msg)
        tid = token.get("tid")
        if not tid:
            msg = "Invalid token."
            raise InvalidTokenError(msg)

        data = self._request(
            "GET", safeformat("/objects/{:int}/tokens/{:hex}", oid, tid)
        )
        return self._parse(Purchase, data)

    def commit_purchase(self, purchase: Purchase | dict[str, Any]) -> Any:
        """Mark a verified purchase as finished.

        Uncommitted purchases are refunded to the buyer by the broker.
        """
        if not isinstance(purchase, Purchase):
            purchase = Purchase.model_validate(purchase)
        return self._request(
            "PUT",
            safeformat("/purchases/{:int}", purchase.purchase_id),
            {"transferid": purchase.transfer_id},
        )

    # Users and accounts

    def get_user_profile(self) -> dict[str, Any]:
        """Profile of the authenticated user."""
        return self._request(
            "GET",
            safeformat("/id/users/username={:string}", quote(self._api_key, safe="")),
        )

    def get_user_id(self) -> int:
        return self.get_user_profile()["uid"]

    def get_account_balance(self) -> Decimal:
        account = self._request("GET", "/fort/accounts/")
        return from_minor_units(account["balance"])

    def authorized_get_account_balance(self, huid: str) -> Decimal:
        """Account balance of the delegated user ``huid``."""
        account = self._request("GET", safeformat("/fort/accounts/{:hex}", huid))
        return from_minor_units(account["balance"])

    def authorized_purchase_object(
        self, oid: int, price: Decimal | float | str, huid: str
    ) -> Any:
        """Purchase ``oid`` in the name of the delegated user ``huid``."""
        return self._request(
            "POST",
            safeformat("/objects/{:int}/purchases", oid),
            {"price": to_minor_units(price), "huid": huid, "autocommit": True},
        )

    def authorized_create_user(
        self,
        identities: dict[str, Any] | None = None,
        primary: str | None = None,
        permissions: list[str] | None = None,
    ) -> dict[str, Any]:
        """Create a user linked to ``identities``, with the caller as delegate.

        Returns:
            Broker response including the new user's ``huid``
        """
        return self._request(
            "POST",
            "/id/users/",
            {
                "identities": identities,
                "primary_identity": primary,
                "delegate_permissions": permissions,
            },
        )

    # Transfers

    def get_transfers(
        self,
        uid: dict[str, Any] | None = None,
        limit: dict[str, Any] | None = None,
    ) -> list[Transfer]:
        """Fetch a filtered list of transfers of the authenticated user.

        Args:
            uid: ``from`` and/or ``to`` user id filters; the broker requires
                at least one of them, equal to the authenticated user's id
            limit: ``first``/``last`` counts and ``since``/``until`` dates

        Returns:
            Transfers with amounts in vingds and decoded descriptions
        """
        uid = uid or {}
        limit = limit or {}
        resource = "/fort/transfers"
        for name in ("from", "to"):
            if uid.get(name) is not None:
                resource += safeformat(f"/{name}={{:int}}", uid[name])
        for name in ("first", "last"):
            if limit.get(name) is not None:
                resource += safeformat(f"/{name}={{:int}}", limit[name])
        for name in ("since", "until"):
            if limit.get(name) is not None:
                resource += safeformat(
                    f"/{name}={{:string}}", to_iso_basic_date(limit[name])
                )

        transfers = self._request("GET", resource) or []
        return [normalize_transfer(raw) for raw in transfers]

    # Vouchers and rewards

    def create_voucher(
        self,
        amount: Decimal | float | str,
        until: Any = None,
        message: str = "",
        gid: str | None = None,
        description: str | None = None,
    ) -> Voucher:
        """Make a new voucher (requires the ``voucher.add`` permission).

        Args:
            amount: Voucher amount in vingds
            until: Expiry timestamp or period (default: 1 month)
            message: Message shown to the user redeeming the voucher
            gid: Voucher group ID; a user can redeem one voucher per group
            description: Internal description, for tracking
        """
        if gid is not None:
            safeformat("{:identifier}", gid)
        params = {
            "amount": to_minor_units(amount),
            "until": to_iso_basic_date(until, self.config.EXP_VOUCHER),
            "message": message,
            "description": description,
            "gid": gid,
        }
        res = self._request("POST", "/vouchers/", params)
        return normalize_voucher(res, self._frontend)

    def get_active_vouchers(self) -> list[Voucher]:
        return normalize_voucher_list(
            self._request("GET", "/vouchers/"), self._frontend
        )

    def get_vouchers(self) -> list[Voucher]:
        """Complete voucher history of the authenticated user."""
        return normalize_voucher_list(
            self._request("GET", "/vouchers/history/"), self._frontend
        )

    def reward_user(
        self, huid: str, amount: Decimal | float | str, description: str | None = None
    ) -> dict[str, Any]:
        """Transfer ``amount`` vingds to user ``huid``.

        Requires the ``transfer.outbound`` permission.
        """
        return self._request(
            "POST",
            "/rewards/",
            {
                "huid_to": huid,
                "amount": to_minor_units(amount),
                "description": description,
            },
        )
