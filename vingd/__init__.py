# Vingd API client

from vingd.client.client import VingdClient
from vingd.common.exceptions import (
    BrokerConnectionError,
    BrokerError,
    FormatError,
    InvalidTokenError,
    TransportError,
    VingdError,
)

__all__ = [
    "BrokerConnectionError",
    "BrokerError",
    "FormatError",
    "InvalidTokenError",
    "TransportError",
    "VingdClient",
    "VingdError",
]
