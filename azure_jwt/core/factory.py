"""Abstract factory for creating token validation components."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from azure_jwt.core.token_verifier import TokenVerifier

if TYPE_CHECKING:
    from azure_jwt.azure.key_cache import KeyCache


class AzureJwtFactory(ABC):
    """Abstract factory for creating token validation components.

    Implementations build a KeySetSource, a KeyCache on top of it, and
    TokenVerifier instances sharing that cache. Every factory owns its own
    cache; create one factory per tenant/application.

    Usage:
        Do not instantiate this class directly. Use create_factory() instead:

        >>> from azure_jwt import create_factory
        >>> factory = create_factory("azure", tenant_id="...", client_id="...")

    See Also:
        - create_factory(): Main entry point for creating factories
        - AzureFactory: Azure AD implementation
        - MockFactory: Caller-managed keys for offline use and testing
    """

    @abstractmethod
    def create_key_cache(self) -> KeyCache:
        """Create or return the factory's key cache.

        The cache is created once and shared by every verifier from this
        factory, so a key fetched for one request serves the next.

        Returns:
            KeyCache: The factory's signing key cache
        """

    @abstractmethod
    def create_token_verifier(self, **kwargs) -> TokenVerifier:
        """Create a token verifier wired to the factory's key cache.

        Args:
            **kwargs: Verifier options such as ``algorithms`` and
                ``leeway_seconds``.

        Returns:
            TokenVerifier: Ready to validate tokens

        Examples:
            >>> factory = create_factory("azure", tenant_id="...", client_id="...")
            >>> verifier = factory.create_token_verifier(leeway_seconds=60)
            >>> claims = await verifier.validate(token)
        """


def create_factory(provider_type: str, **kwargs) -> AzureJwtFactory:
    """Create a factory for the specified provider type.

    Args:
        provider_type: The key provider type to use.
            Valid values: "azure", "mock"

        **kwargs: Provider-specific configuration arguments.

            For provider_type="azure":
                tenant_id (str, required): Azure AD tenant ID (GUID or domain)
                client_id (str, required): Application ID expected in ``aud``
                config (TenantConfig, optional): Full configuration, instead
                    of tenant_id/client_id
                transport (HttpTransport, optional): HTTP capability
                timeout (float, optional): Per-request timeout in seconds
                ttl_seconds, refresh_on_miss, min_refresh_interval_seconds:
                    KeyCache options

            For provider_type="mock":
                key_set (KeySet, optional): Keys to serve
                issuer (str, optional): Default expected issuer
                audience (str, optional): Default expected audience

    Returns:
        AzureJwtFactory: A configured factory instance

    Raises:
        ValueError: If provider_type is unknown or required arguments are missing.

    Examples:
        With environment variables:
            >>> from azure_jwt import TenantConfig
            >>> factory = create_factory("azure", config=TenantConfig.from_env())
    """
    if provider_type == "azure":
        from azure_jwt.azure.factory import AzureFactory

        if "config" not in kwargs and ("tenant_id" not in kwargs or "client_id" not in kwargs):
            raise ValueError(
                "Missing required arguments 'tenant_id' and 'client_id' for provider_type='azure'. "
                "Example: create_factory('azure', tenant_id='contoso.onmicrosoft.com', client_id='...')"
            )
        return AzureFactory(**kwargs)
    elif provider_type == "mock":
        from azure_jwt.mock.factory import MockFactory

        return MockFactory(**kwargs)
    else:
        raise ValueError(
            f"Unknown provider type: '{provider_type}'. "
            f"Valid types: 'azure', 'mock'."
        )
