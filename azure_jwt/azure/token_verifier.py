"""Azure AD JWT token verifier.

This module provides JWT validation for Azure AD / Entra ID tokens with:
- Signing key resolution through an injectable KeyCache
- A single key refresh on unknown kid (handles key rotation)
- Algorithm pinning against the resolved key's type
- Strict exp/nbf/iss/aud checks with optional clock-skew leeway
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Iterable, Mapping, Optional

import structlog
from jwt.algorithms import get_default_algorithms

from azure_jwt import token_parser
from azure_jwt.azure.key_cache import KeyCache
from azure_jwt.core.token_verifier import TokenVerifier
from azure_jwt.exceptions import (
    AlgorithmMismatchError,
    AudienceMismatchError,
    InvalidSignatureError,
    IssuerMismatchError,
    MalformedTokenError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from azure_jwt.models import JWK, Claims, ParsedToken, TokenHeader

log = structlog.get_logger()

DEFAULT_ALGORITHMS = ("RS256",)

_ALGORITHMS = get_default_algorithms()


def _numeric_claim(claims: Mapping[str, Any], name: str) -> Optional[float]:
    value = claims.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedTokenError(f"Token claim '{name}' must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise MalformedTokenError(f"Token claim '{name}' must be finite")
    return value


class AzureVerifier(TokenVerifier):
    """Azure AD JWT token verifier.

    Args:
        key_cache: Cache used to resolve signing keys. Owned by the caller so
            several tenants can keep isolated caches in one process.
        issuer: Issuer to require when validate() is not given one
        audience: Audience (application client ID) to require when validate()
            is not given one
        algorithms: Accepted signature algorithms. Defaults to RS256 only.
        leeway_seconds: Allowed clock skew for exp/nbf/iat. Defaults to 0.
        clock: Returns the current Unix time. Defaults to time.time.
    """

    def __init__(
        self,
        key_cache: KeyCache,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        algorithms: Iterable[str] = DEFAULT_ALGORITHMS,
        leeway_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ):
        self.key_cache = key_cache
        self.issuer = issuer
        self.audience = audience
        self.algorithms = frozenset(algorithms)
        self.leeway_seconds = leeway_seconds
        self.clock = clock

        unsupported = self.algorithms - set(_ALGORITHMS)
        if unsupported:
            raise ValueError(f"Unsupported algorithms: {sorted(unsupported)}")

    def get_unverified_header(self, token: str) -> TokenHeader:
        return token_parser.parse(token).header

    async def validate(
        self,
        token: str,
        expected_issuer: Optional[str] = None,
        expected_audience: Optional[str] = None,
        now: Optional[float] = None,
    ) -> Claims:
        """Validate an Azure AD token and return its claims."""
        expected_issuer = expected_issuer if expected_issuer is not None else self.issuer
        expected_audience = expected_audience if expected_audience is not None else self.audience
        if expected_issuer is None or expected_audience is None:
            raise ValueError("expected_issuer and expected_audience are required")
        if now is None:
            now = self.clock()

        parsed = token_parser.parse(token)
        header = parsed.header

        # Cheap rejections that need no key: expiry and disallowed algorithms
        self._check_expiry(parsed.unverified_claims, now)
        if header.alg not in self.algorithms:
            raise AlgorithmMismatchError(header.alg)

        key = await self.key_cache.resolve(header.kid)
        self._verify_signature(parsed, key)

        payload = parsed.unverified_claims
        self._validate_claims(payload, expected_issuer, expected_audience, now)

        claims = Claims.from_payload(payload)
        log.debug("token_verified", kid=header.kid, sub=claims.sub, tid=claims.tenant_id)
        return claims

    def _verify_signature(self, parsed: ParsedToken, key: JWK) -> None:
        alg = parsed.header.alg
        if alg not in key.algorithms:
            raise AlgorithmMismatchError(alg, key.kty)

        algorithm = _ALGORITHMS[alg]
        public_key = key.to_public_key()
        try:
            valid = algorithm.verify(parsed.signing_input, public_key, parsed.signature)
        except Exception as e:
            raise InvalidSignatureError(f"Token signature verification failed: {e}") from e
        if not valid:
            raise InvalidSignatureError()

    def _check_expiry(self, claims: Mapping[str, Any], now: float) -> None:
        exp = _numeric_claim(claims, "exp")
        if exp is None:
            raise MalformedTokenError("Token missing exp claim")
        if exp <= now - self.leeway_seconds:
            raise TokenExpiredError()

    def _validate_claims(
        self,
        claims: Mapping[str, Any],
        expected_issuer: str,
        expected_audience: str,
        now: float,
    ) -> None:
        self._check_expiry(claims, now)

        nbf = _numeric_claim(claims, "nbf")
        if nbf is not None and nbf > now + self.leeway_seconds:
            raise TokenNotYetValidError()

        iat = _numeric_claim(claims, "iat")
        if iat is not None and iat > now + self.leeway_seconds:
            raise TokenNotYetValidError("Token was issued in the future")

        issuer = claims.get("iss")
        if issuer != expected_issuer:
            raise IssuerMismatchError(issuer if isinstance(issuer, str) else None, expected_issuer)

        aud = claims.get("aud")
        if isinstance(aud, str):
            matches = aud == expected_audience
        elif isinstance(aud, list):
            matches = expected_audience in aud
        else:
            matches = False
        if not matches:
            raise AudienceMismatchError(expected_audience)
