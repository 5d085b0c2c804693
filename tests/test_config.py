import logging

import pytest

from vingd.common.config import Config


def test_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "VINGD_ENVIRONMENT",
        "VINGD_ENDPOINT",
        "VINGD_FRONTEND",
        "VINGD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    assert config.ENVIRONMENT == "production"
    assert config.ENDPOINT == "https://api.vingd.com/broker/v1"
    assert config.FRONTEND == "https://www.vingd.com"
    assert config.CONNECT_TIMEOUT == 5  # noqa: PLR2004
    assert config.MAX_REDIRECTS == 5  # noqa: PLR2004
    assert config.VERIFY_SSL is True
    assert config.EXP_ORDER == "+15 minutes"
    assert config.EXP_VOUCHER == "+1 month"
    assert config.LOG_LEVEL == logging.INFO


def test_config_environments() -> None:
    assert Config.environment("sandbox") == (
        "https://api.vingd.com/sandbox/broker/v1",
        "http://www.sandbox.vingd.com",
    )
    with pytest.raises(ValueError, match="Unknown environment"):
        Config.environment("staging")


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VINGD_ENVIRONMENT", "sandbox")
    monkeypatch.setenv("VINGD_FRONTEND", "https://front.test")
    monkeypatch.setenv("VINGD_USERNAME", "user")
    monkeypatch.delenv("VINGD_ENDPOINT", raising=False)
    config = Config()
    assert config.ENDPOINT == "https://api.vingd.com/sandbox/broker/v1"
    assert config.FRONTEND == "https://front.test"
    assert config.USERNAME == "user"
