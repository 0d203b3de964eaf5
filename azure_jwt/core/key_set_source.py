"""Abstract interface for key set sources.

A KeySetSource knows where a provider publishes its signing keys and how to
fetch them. It returns a fresh KeySet on every call and keeps no shared
state; caching is the job of KeyCache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from azure_jwt.models import KeySet


class KeySetSource(ABC):
    """Abstract interface for fetching a provider's published keys.

    Implementations:
        - AzureDiscoveryClient: OpenID discovery document + JWKS endpoint
        - StaticKeySetSource: Caller-managed keys (offline use and tests)
    """

    @abstractmethod
    async def fetch_key_set(self) -> KeySet:
        """Fetch the provider's current key set.

        Returns:
            A new KeySet with every currently published key

        Raises:
            NetworkError: On transport failure or timeout
            UnexpectedStatusError: On a non-success HTTP status
            MalformedKeySetError: If the documents do not match the schema
        """
