# Broker client
from vingd.client.client import VingdClient as VingdClient
from vingd.client.http import HttpTransport as HttpTransport
from vingd.client.http import TransportResponse as TransportResponse

__all__ = ["HttpTransport", "TransportResponse", "VingdClient"]
