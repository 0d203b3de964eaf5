"""Caller-managed key implementation for offline use and testing."""

from azure_jwt.mock.factory import MockFactory
from azure_jwt.mock.key_set_source import StaticKeySetSource

__all__ = [
    "MockFactory",
    "StaticKeySetSource",
]
