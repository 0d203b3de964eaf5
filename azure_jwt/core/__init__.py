"""Core abstractions for azure_jwt."""

from azure_jwt.core.factory import AzureJwtFactory, create_factory
from azure_jwt.core.key_set_source import KeySetSource
from azure_jwt.core.token_verifier import TokenVerifier
from azure_jwt.core.transport import HttpResponse, HttpTransport

__all__ = [
    "AzureJwtFactory",
    "HttpResponse",
    "HttpTransport",
    "KeySetSource",
    "TokenVerifier",
    "create_factory",
]
