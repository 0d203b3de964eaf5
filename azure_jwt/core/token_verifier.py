"""Abstract token verifier interface.

This module defines the interface for JWT token validation. Implementations
resolve signing keys, verify the signature and enforce the claims policy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from azure_jwt.models import Claims, TokenHeader


class TokenVerifier(ABC):
    """Abstract interface for JWT token validation.

    Implementations handle:
    - Signing key resolution (JWKS caching and refresh)
    - Token signature verification
    - Time, issuer and audience checks

    Implementations:
        - AzureVerifier: Azure AD / Entra ID tokens
    """

    @abstractmethod
    async def validate(
        self,
        token: str,
        expected_issuer: Optional[str] = None,
        expected_audience: Optional[str] = None,
        now: Optional[float] = None,
    ) -> Claims:
        """Validate a JWT token and return its claims.

        Args:
            token: The JWT token to validate (without 'Bearer ' prefix)
            expected_issuer: Exact issuer to require. Defaults to the
                verifier's configured issuer.
            expected_audience: Audience to require. Defaults to the
                verifier's configured audience.
            now: Unix timestamp to validate against. Defaults to the
                verifier's clock.

        Returns:
            Claims of the verified token

        Raises:
            MalformedTokenError: If the token cannot be parsed
            UnknownKeyIdError: If no published key matches the token's kid
            DiscoveryError: If signing keys could not be fetched
            AlgorithmMismatchError: If the header algorithm does not fit the key
            InvalidSignatureError: If signature verification fails
            ClaimsError: If a time, issuer or audience check fails
        """

    @abstractmethod
    def get_unverified_header(self, token: str) -> TokenHeader:
        """Extract the header from a token WITHOUT verifying the signature.

        WARNING: Only use this for routing, debugging or logging purposes.
        Never trust it for authorization decisions.

        Args:
            token: The JWT token

        Returns:
            TokenHeader with the (unverified) alg, kid and typ
        """
