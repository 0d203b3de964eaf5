"""HTTP transport implementations for discovery clients."""

from azure_jwt.transports.requests_transport import RequestsTransport

__all__ = [
    "RequestsTransport",
]
