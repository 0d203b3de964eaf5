"""Factory for Azure AD components."""

from typing import Optional

from azure_jwt.azure.discovery import AzureDiscoveryClient
from azure_jwt.azure.key_cache import KeyCache
from azure_jwt.azure.token_verifier import AzureVerifier
from azure_jwt.core.factory import AzureJwtFactory
from azure_jwt.core.transport import HttpTransport
from azure_jwt.models import DEFAULT_AUTHORITY, DEFAULT_VERSION, TenantConfig


class AzureFactory(AzureJwtFactory):
    """Factory for Azure AD components.

    Creates an AzureDiscoveryClient, a KeyCache and AzureVerifier instances
    that are properly configured to work together.

    Args:
        tenant_id: Azure AD tenant ID (GUID or verified domain)
        client_id: Application ID that tokens must carry in ``aud``
        config: Full TenantConfig; overrides tenant_id/client_id/authority/version
        authority: Login host. Defaults to login.microsoftonline.com.
        version: Endpoint version, "v2.0" (default) or "v1.0"
        transport: HTTP capability. Defaults to RequestsTransport.
        timeout: Per-request timeout in seconds. Defaults to 10.
        ttl_seconds: Key cache lifetime. Defaults to 24 hours.
        refresh_on_miss: Refresh once on unknown kid. Defaults to True.
        min_refresh_interval_seconds: Rate limit for refresh-on-miss.

    Examples:
        >>> factory = AzureFactory(tenant_id="contoso.onmicrosoft.com", client_id="6e74...")
        >>> verifier = factory.create_token_verifier()
        >>> claims = await verifier.validate(token)
    """

    def __init__(
        self,
        tenant_id: Optional[str] = None,
        client_id: Optional[str] = None,
        config: Optional[TenantConfig] = None,
        authority: str = DEFAULT_AUTHORITY,
        version: Optional[str] = DEFAULT_VERSION,
        transport: Optional[HttpTransport] = None,
        timeout: float = 10.0,
        ttl_seconds: Optional[float] = 86400,
        refresh_on_miss: bool = True,
        min_refresh_interval_seconds: float = 0,
    ):
        if config is None:
            if not tenant_id or not client_id:
                raise ValueError("AzureFactory requires tenant_id and client_id, or config")
            config = TenantConfig(
                tenant_id=tenant_id,
                client_id=client_id,
                authority=authority,
                version=version,
            )
        self.config = config
        self.transport = transport
        self.timeout = timeout
        self.ttl_seconds = ttl_seconds
        self.refresh_on_miss = refresh_on_miss
        self.min_refresh_interval_seconds = min_refresh_interval_seconds
        self._key_cache: Optional[KeyCache] = None

    def create_discovery_client(self) -> AzureDiscoveryClient:
        return AzureDiscoveryClient(self.config, transport=self.transport, timeout=self.timeout)

    def create_key_cache(self) -> KeyCache:
        if self._key_cache is None:
            self._key_cache = KeyCache(
                self.create_discovery_client(),
                ttl_seconds=self.ttl_seconds,
                refresh_on_miss=self.refresh_on_miss,
                min_refresh_interval_seconds=self.min_refresh_interval_seconds,
            )
        return self._key_cache

    def create_token_verifier(self, **kwargs) -> AzureVerifier:
        """Create an AzureVerifier expecting the tenant's issuer and client ID."""
        kwargs.setdefault("issuer", self.config.issuer)
        kwargs.setdefault("audience", self.config.client_id)
        return AzureVerifier(self.create_key_cache(), **kwargs)
