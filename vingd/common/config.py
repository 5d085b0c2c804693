"""
Configuration settings for the Vingd API client.
"""

from __future__ import annotations

import logging
import os


class Config:
    """Central configuration class for all client settings."""

    # Broker (backend) and user frontend URLs, per environment
    ENVIRONMENTS: dict[str, tuple[str, str]] = {
        "production": (
            "https://api.vingd.com/broker/v1",
            "https://www.vingd.com",
        ),
        "sandbox": (
            "https://api.vingd.com/sandbox/broker/v1",
            "http://www.sandbox.vingd.com",
        ),
    }

    def __init__(self) -> None:
        # Credentials and environment
        self.USERNAME: str | None = os.getenv("VINGD_USERNAME")
        self.PASSWORD: str | None = os.getenv("VINGD_PASSWORD")
        self.ENVIRONMENT: str = os.getenv("VINGD_ENVIRONMENT", "production")
        endpoint, frontend = self.environment(self.ENVIRONMENT)
        self.ENDPOINT: str = os.getenv("VINGD_ENDPOINT", endpoint)
        self.FRONTEND: str = os.getenv("VINGD_FRONTEND", frontend)

        # Transport settings
        self.USER_AGENT: str = "vingd-api-python/1.7"
        self.CONNECT_TIMEOUT: float = 5  # Seconds to establish a connection
        self.READ_TIMEOUT: float = 30  # Seconds to wait for the response
        self.MAX_REDIRECTS: int = 5
        self.VERIFY_SSL: bool = True

        # Default expiry of an object order: 15 minutes from now
        self.EXP_ORDER: str = "+15 minutes"
        # Default expiry of user-created vouchers: 1 month from now
        self.EXP_VOUCHER: str = "+1 month"

        # Date formats (strftime)
        self.DATE_ISO: str = "%Y-%m-%dT%H:%M:%S%:z"
        self.DATE_ISO_BASIC: str = "%Y%m%dT%H%M%S%z"
        self.DATE_HUMAN: str = "%B %-d, %Y at %H:%M:%S %z"

        # Limit on the JSON-encoded object description (name, url, metadata)
        self.MAX_OBJECT_DESCRIPTION_SIZE: int = 4096

        # Logging
        self.LOG_LEVEL: int | str = os.getenv("VINGD_LOG_LEVEL", logging.INFO)
        self.LOG_FORMAT: str = os.getenv(
            "VINGD_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    @classmethod
    def environment(cls, name: str) -> tuple[str, str]:
        """Return ``(endpoint, frontend)`` URLs of a named environment."""
        try:
            return cls.ENVIRONMENTS[name]
        except KeyError as err:
            msg = (
                f"Unknown environment '{name}', "
                f"expected one of: {', '.join(sorted(cls.ENVIRONMENTS))}"
            )
            raise ValueError(msg) from err
