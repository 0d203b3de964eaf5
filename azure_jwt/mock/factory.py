"""Factory for caller-managed keys (offline use and testing)."""

from typing import Optional

from azure_jwt.azure.key_cache import KeyCache
from azure_jwt.azure.token_verifier import AzureVerifier
from azure_jwt.core.factory import AzureJwtFactory
from azure_jwt.mock.key_set_source import StaticKeySetSource
from azure_jwt.models import KeySet


class MockFactory(AzureJwtFactory):
    """Factory whose keys come from a StaticKeySetSource.

    Tokens are still fully verified; only key discovery is replaced.

    Examples:
        >>> factory = MockFactory(key_set=KeySet.from_jwks(jwks), issuer=iss, audience=aud)
        >>> verifier = factory.create_token_verifier()
        >>> factory.source.set_key_set(rotated_key_set)  # simulate rotation
    """

    def __init__(
        self,
        key_set: Optional[KeySet] = None,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.source = StaticKeySetSource(key_set)
        self.issuer = issuer
        self.audience = audience
        self._key_cache: Optional[KeyCache] = None

    def create_key_cache(self) -> KeyCache:
        if self._key_cache is None:
            self._key_cache = KeyCache(self.source, ttl_seconds=None)
        return self._key_cache

    def create_token_verifier(self, **kwargs) -> AzureVerifier:
        kwargs.setdefault("issuer", self.issuer)
        kwargs.setdefault("audience", self.audience)
        return AzureVerifier(self.create_key_cache(), **kwargs)
