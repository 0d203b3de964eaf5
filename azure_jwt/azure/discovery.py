"""Azure AD key discovery.

Resolves the tenant's OpenID discovery document, follows its ``jwks_uri``
and deserializes the published signing keys.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog

from azure_jwt.core.key_set_source import KeySetSource
from azure_jwt.core.transport import HttpTransport
from azure_jwt.exceptions import MalformedKeySetError, NetworkError, UnexpectedStatusError
from azure_jwt.models import KeySet, ProviderMetadata, TenantConfig

log = structlog.get_logger()


class AzureDiscoveryClient(KeySetSource):
    """Fetches Azure AD signing keys for one tenant.

    When ``config.jwks_uri`` is set the JWKS endpoint is fetched directly,
    otherwise the discovery document is read first to find it.

    Args:
        config: Tenant/application configuration
        transport: HTTP capability. Defaults to RequestsTransport.
        timeout: Seconds allowed for each HTTP request. Defaults to 10.
    """

    def __init__(
        self,
        config: TenantConfig,
        transport: Optional[HttpTransport] = None,
        timeout: float = 10.0,
    ):
        if transport is None:
            from azure_jwt.transports.requests_transport import RequestsTransport

            transport = RequestsTransport()
        self.config = config
        self.transport = transport
        self.timeout = timeout

    @property
    def discovery_url(self) -> str:
        return self.config.discovery_url

    async def _get(self, url: str) -> Any:
        """GET a JSON document, bounded by the configured timeout."""
        try:
            response = await asyncio.wait_for(
                self.transport.get_json(url, timeout=self.timeout),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise NetworkError(url, f"timed out after {self.timeout}s") from e

        if not response.ok:
            log.warning("discovery_unexpected_status", url=url, status_code=response.status_code)
            raise UnexpectedStatusError(url, response.status_code)
        return response.body

    async def fetch_metadata(self) -> ProviderMetadata:
        """Fetch and read the OpenID discovery document.

        Raises:
            NetworkError: On transport failure or timeout
            UnexpectedStatusError: On a non-success HTTP status
            MalformedKeySetError: If the document has no usable jwks_uri
        """
        document = await self._get(self.discovery_url)
        if not isinstance(document, dict):
            raise MalformedKeySetError("Discovery document is not an object")

        jwks_uri = document.get("jwks_uri")
        if not isinstance(jwks_uri, str) or not jwks_uri.startswith("https://"):
            raise MalformedKeySetError("Discovery document has no valid jwks_uri")

        issuer = document.get("issuer")
        return ProviderMetadata(
            issuer=issuer if isinstance(issuer, str) else None,
            jwks_uri=jwks_uri,
        )

    async def fetch_key_set(self) -> KeySet:
        """Fetch the tenant's current signing keys."""
        jwks_uri = self.config.jwks_uri
        if jwks_uri is None:
            jwks_uri = (await self.fetch_metadata()).jwks_uri

        key_set = KeySet.from_jwks(await self._get(jwks_uri))
        log.debug("jwks_fetched", jwks_uri=jwks_uri, key_count=len(key_set))
        return key_set
