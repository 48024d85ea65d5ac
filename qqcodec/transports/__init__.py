"""qqcodec transports."""

from qqcodec.transports.base import Scene, SendResult, Transport, TransportError
from qqcodec.transports.http_transport import HttpTransport

__all__ = [
    "Scene",
    "SendResult",
    "Transport",
    "TransportError",
    "HttpTransport",
]
