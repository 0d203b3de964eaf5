"""Azure AD implementation of azure_jwt."""

from azure_jwt.azure.discovery import AzureDiscoveryClient
from azure_jwt.azure.factory import AzureFactory
from azure_jwt.azure.key_cache import KeyCache
from azure_jwt.azure.token_verifier import AzureVerifier

__all__ = [
    "AzureDiscoveryClient",
    "AzureFactory",
    "AzureVerifier",
    "KeyCache",
]
