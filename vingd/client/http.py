"""
HTTP transport for the broker client, based on requests.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import requests

from vingd.common.config import Config
from vingd.common.exceptions import TransportError
from vingd.common.mixins import Configurable

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# LWS = [CRLF] 1*( SP | HT )  (RFC 2616 2.2)
FOLDED_LINE_RE = re.compile(r"\r?\n[ \t]+")

BODYLESS_METHODS = frozenset({"GET", "HEAD"})


@dataclass
class TransportResponse:
    """Raw HTTP response: status line, merged headers, cookies and body."""

    status: int
    message: str = ""
    headers: dict[str, str | list[str]] = field(default_factory=dict)
    cookies: list[str] = field(default_factory=list)
    body: str = ""


def merge_headers(
    items: Iterable[tuple[str, str]],
) -> tuple[dict[str, str | list[str]], list[str]]:
    """Process raw header lines into a dict and a list of cookies.

    Header names are lower-cased, folded values are unfolded and repeated
    headers are merged into a list of values.
    """
    headers: dict[str, str | list[str]] = {}
    cookies: list[str] = []
    for name, raw_value in items:
        value = FOLDED_LINE_RE.sub(" ", raw_value).strip()
        if not value:
            continue
        key = name.strip().lower()
        if key in headers:
            previous = headers[key]
            if isinstance(previous, list):
                previous.append(value)
            else:
                headers[key] = [previous, value]
        else:
            headers[key] = value
        if key == "set-cookie":
            cookies.append(value)
    return headers, cookies


def header_items(response: Any) -> Iterable[tuple[str, str]]:
    """Header lines of a response, duplicates included when available."""
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "iteritems"):
        return raw_headers.iteritems()
    return response.headers.items()


class HttpTransport(Configurable):
    """Issues single blocking HTTP requests.

    A new ``requests.Session`` is used for every request, so one transport
    may be shared between threads.
    """

    def __init__(self, **overrides: Any) -> None:
        self.config = Config()
        self.apply_overrides(
            overrides,
            self.config,
            [
                "connect_timeout",
                "read_timeout",
                "max_redirects",
                "verify_ssl",
                "user_agent",
            ],
        )

    def send(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | bytes | None = None,
        auth: tuple[str, str] | None = None,
    ) -> TransportResponse:
        """Issue a request and return the parsed response.

        Raises:
            TransportError: the connection failed, timed out or exceeded
                the redirect limit.
        """
        method = method.upper()
        request_headers = {"User-Agent": self.user_agent}
        request_headers.update(headers or {})

        with requests.Session() as session:
            session.max_redirects = self.max_redirects
            try:
                response = session.request(
                    method,
                    url,
                    data=None if method in BODYLESS_METHODS else body,
                    headers=request_headers,
                    auth=auth,
                    verify=self.verify_ssl,
                    timeout=(self.connect_timeout, self.read_timeout),
                )
            except requests.TooManyRedirects as err:
                msg = "Too many redirects"
                raise TransportError(msg) from err
            except requests.RequestException as err:
                raise TransportError(str(err)) from err

        return self.parse_response(response)

    @staticmethod
    def parse_response(response: Any) -> TransportResponse:
        """Build a ``TransportResponse`` from a ``requests.Response``."""
        headers, cookies = merge_headers(header_items(response))
        return TransportResponse(
            status=response.status_code,
            message=response.reason or "",
            headers=headers,
            cookies=cookies,
            body=response.text,
        )
