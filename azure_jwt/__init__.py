"""azure_jwt - Azure AD token validation with JWKS caching.

azure_jwt validates bearer tokens issued by Azure AD / Entra ID for a
tenant/application.

Features:
- OpenID discovery of the tenant's signing keys (JWKS)
- In-memory key cache with a single refresh on unknown kid (key rotation)
- Signature verification pinned to the key's algorithm family
- Strict expiry, not-before, issuer and audience checks
- Async API; network calls bounded by a timeout
"""

from azure_jwt.core.factory import AzureJwtFactory, create_factory
from azure_jwt.core.key_set_source import KeySetSource
from azure_jwt.core.token_verifier import TokenVerifier
from azure_jwt.core.transport import HttpResponse, HttpTransport
from azure_jwt.azure import AzureDiscoveryClient, AzureFactory, AzureVerifier, KeyCache
from azure_jwt.mock import MockFactory, StaticKeySetSource
from azure_jwt.transports import RequestsTransport
from azure_jwt.token_parser import extract_bearer_token, parse
from azure_jwt.exceptions import (
    AlgorithmMismatchError,
    AudienceMismatchError,
    AzureJwtError,
    ClaimsError,
    DiscoveryError,
    InvalidSignatureError,
    IssuerMismatchError,
    MalformedKeySetError,
    MalformedTokenError,
    NetworkError,
    TokenError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnexpectedStatusError,
    UnknownKeyIdError,
)
from azure_jwt.models import (
    JWK,
    CacheEntry,
    Claims,
    KeySet,
    ParsedToken,
    ProviderMetadata,
    TenantConfig,
    TokenHeader,
)

__version__ = "0.1.0"

__all__ = [
    # Core interfaces
    "HttpTransport",
    "KeySetSource",
    "TokenVerifier",
    # Factory (recommended entry point)
    "create_factory",
    "AzureJwtFactory",
    "AzureFactory",
    "MockFactory",
    # Components
    "AzureDiscoveryClient",
    "AzureVerifier",
    "KeyCache",
    "RequestsTransport",
    "StaticKeySetSource",
    # Parsing
    "extract_bearer_token",
    "parse",
    # Models
    "CacheEntry",
    "Claims",
    "HttpResponse",
    "JWK",
    "KeySet",
    "ParsedToken",
    "ProviderMetadata",
    "TenantConfig",
    "TokenHeader",
    # Exceptions - Base
    "AzureJwtError",
    "TokenError",
    "ClaimsError",
    "DiscoveryError",
    # Exceptions - Token
    "AlgorithmMismatchError",
    "InvalidSignatureError",
    "MalformedTokenError",
    "UnknownKeyIdError",
    # Exceptions - Claims
    "AudienceMismatchError",
    "IssuerMismatchError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    # Exceptions - Discovery
    "MalformedKeySetError",
    "NetworkError",
    "UnexpectedStatusError",
]
