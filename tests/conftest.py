import hashlib
import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from vingd.client.client import VingdClient

ENDPOINT = "https://broker.test/broker/v1"
FRONTEND = "https://www.vingd.test"
USERNAME = "seller"
PASSWORD = "secret"
SECRET_HASH = hashlib.sha1(PASSWORD.encode()).hexdigest()  # noqa: S324


class MockResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        reason: str = "OK",
        headers: dict[str, str] | None = None,
        raw: Any = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {"Content-Type": "application/json"}
        self.raw = raw
        if body is None:
            self.text = ""
        elif isinstance(body, str):
            self.text = body
        else:
            self.text = json.dumps(body)


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict[str, Any]
    max_redirects: int

    @property
    def json(self) -> Any:
        return json.loads(self.kwargs["data"])


@dataclass
class FakeBroker:
    """Queue of canned responses served in place of requests.Session.request."""

    responses: list[Any] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)

    def respond(self, status: int = 200, body: Any = None, **kwargs: Any) -> None:
        self.responses.append(MockResponse(status, body, **kwargs))

    def respond_data(self, data: Any) -> None:
        self.respond(200, {"data": data})

    def fail(self, error: Exception) -> None:
        self.responses.append(error)

    def handle(self, session: requests.Session, method: str, url: str, **kwargs: Any) -> Any:
        self.calls.append(Call(method, url, kwargs, session.max_redirects))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> Call:
        return self.calls[-1]


@pytest.fixture
def broker(monkeypatch: pytest.MonkeyPatch) -> FakeBroker:
    """Replace all outgoing HTTP requests with canned responses."""
    fake = FakeBroker()

    def request(session: requests.Session, method: str, url: str, **kwargs: Any) -> Any:
        return fake.handle(session, method, url, **kwargs)

    monkeypatch.setattr(requests.Session, "request", request)
    return fake


@pytest.fixture
def client() -> VingdClient:
    """Create VingdClient instance against the test broker."""
    return VingdClient(USERNAME, PASSWORD, endpoint=ENDPOINT, frontend=FRONTEND)
