"""azure_jwt exceptions.

All exceptions inherit from AzureJwtError for easy catching.
"""

from __future__ import annotations

from typing import Optional


class AzureJwtError(Exception):
    """Base exception for azure_jwt errors."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


# ==================== Token Errors ====================


class TokenError(AzureJwtError):
    """Base class for errors caused by the token itself."""

    def __init__(self, message: str, code: str = "INVALID_TOKEN"):
        super().__init__(message=message, code=code)


class MalformedTokenError(TokenError):
    """Raised when a token cannot be split, decoded or deserialized."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message=message, code="MALFORMED_TOKEN")


class UnknownKeyIdError(TokenError):
    """Raised when no published key matches the token's kid, even after a refresh."""

    def __init__(self, kid: str):
        super().__init__(
            message=f"No signing key found for kid '{kid}'",
            code="UNKNOWN_KEY_ID",
        )
        self.kid = kid


class AlgorithmMismatchError(TokenError):
    """Raised when the header algorithm is not allowed for the resolved key."""

    def __init__(self, algorithm: str, key_type: Optional[str] = None):
        if key_type:
            message = f"Algorithm '{algorithm}' cannot be used with a '{key_type}' key"
        else:
            message = f"Algorithm '{algorithm}' is not allowed"
        super().__init__(message=message, code="ALGORITHM_MISMATCH")
        self.algorithm = algorithm
        self.key_type = key_type


class InvalidSignatureError(TokenError):
    """Raised when token signature verification fails."""

    def __init__(self, message: str = "Token signature verification failed"):
        super().__init__(message=message, code="INVALID_SIGNATURE")


# ==================== Claims Errors ====================


class ClaimsError(TokenError):
    """Base class for claims-policy violations on a verified token."""


class TokenExpiredError(ClaimsError):
    """Raised when token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message, code="TOKEN_EXPIRED")


class TokenNotYetValidError(ClaimsError):
    """Raised when token is used before its nbf (or issued in the future)."""

    def __init__(self, message: str = "Token is not yet valid"):
        super().__init__(message=message, code="TOKEN_NOT_YET_VALID")


class IssuerMismatchError(ClaimsError):
    """Raised when token issuer is not the expected one."""

    def __init__(self, issuer: Optional[str], expected: str):
        super().__init__(
            message=f"Token issuer '{issuer}' does not match expected issuer '{expected}'",
            code="ISSUER_MISMATCH",
        )
        self.issuer = issuer
        self.expected = expected


class AudienceMismatchError(ClaimsError):
    """Raised when token audience does not include the expected audience."""

    def __init__(self, expected: str):
        super().__init__(
            message=f"Token audience does not include '{expected}'",
            code="AUDIENCE_MISMATCH",
        )
        self.expected = expected


# ==================== Discovery Errors ====================


class DiscoveryError(AzureJwtError):
    """Base class for failures fetching provider metadata or keys."""

    def __init__(self, message: str, code: str = "DISCOVERY_ERROR"):
        super().__init__(message=message, code=code)


class MalformedKeySetError(DiscoveryError):
    """Raised when provider metadata or JWKS documents do not match the expected schema."""

    def __init__(self, message: str = "Malformed key set"):
        super().__init__(message=message, code="MALFORMED_KEY_SET")


class NetworkError(DiscoveryError):
    """Raised on transport failures and timeouts."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message=f"Request to '{url}' failed: {reason}",
            code="NETWORK_ERROR",
        )
        self.url = url
        self.reason = reason


class UnexpectedStatusError(DiscoveryError):
    """Raised when the provider answers with a non-success HTTP status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(
            message=f"Request to '{url}' returned HTTP {status_code}",
            code="UNEXPECTED_STATUS",
        )
        self.url = url
        self.status_code = status_code
