"""Key, token and claims models - immutable data structures."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from jwt.algorithms import ECAlgorithm, RSAAlgorithm

from azure_jwt.exceptions import MalformedKeySetError

# Signature algorithms each key type may verify. Symmetric ("oct") keys map
# to none.
KEY_TYPE_ALGORITHMS: Dict[str, frozenset] = {
    "RSA": frozenset({"RS256", "RS384", "RS512", "PS256", "PS384", "PS512"}),
    "EC": frozenset({"ES256", "ES384", "ES512"}),
}

# Key material each key type must carry
REQUIRED_KEY_PARAMS: Dict[str, Tuple[str, ...]] = {
    "RSA": ("n", "e"),
    "EC": ("crv", "x", "y"),
}

DEFAULT_AUTHORITY = "login.microsoftonline.com"
DEFAULT_VERSION = "v2.0"


@dataclass(frozen=True)
class JWK:
    """A single public JSON Web Key."""

    kid: str
    kty: str
    use: Optional[str] = None
    alg: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "JWK":
        """Build a JWK from one entry of a JWKS ``keys`` list.

        Raises:
            MalformedKeySetError: If kid/kty or the key type's parameters are
                missing or not strings
        """
        if not isinstance(data, dict):
            raise MalformedKeySetError("JWK entry is not an object")

        kid = data.get("kid")
        kty = data.get("kty")
        if not isinstance(kid, str) or not kid:
            raise MalformedKeySetError("JWK entry missing kid")
        if not isinstance(kty, str) or not kty:
            raise MalformedKeySetError(f"JWK '{kid}' missing kty")

        for name in REQUIRED_KEY_PARAMS.get(kty, ()):
            if not isinstance(data.get(name), str):
                raise MalformedKeySetError(f"JWK '{kid}' missing {kty} parameter '{name}'")

        use = data.get("use")
        alg = data.get("alg")
        if use is not None and not isinstance(use, str):
            raise MalformedKeySetError(f"JWK '{kid}' has invalid use")
        if alg is not None and not isinstance(alg, str):
            raise MalformedKeySetError(f"JWK '{kid}' has invalid alg")

        params = {k: v for k, v in data.items() if k not in ("kid", "kty", "use", "alg")}
        return cls(kid=kid, kty=kty, use=use, alg=alg, params=params)

    @property
    def algorithms(self) -> frozenset:
        """Signature algorithms this key can verify."""
        allowed = KEY_TYPE_ALGORITHMS.get(self.kty, frozenset())
        if self.alg is not None:
            return allowed & {self.alg}
        return allowed

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kid": self.kid, "kty": self.kty}
        if self.use is not None:
            data["use"] = self.use
        if self.alg is not None:
            data["alg"] = self.alg
        data.update(self.params)
        return data

    def to_public_key(self) -> Any:
        """Convert to a cryptography public key object.

        Raises:
            MalformedKeySetError: If the key material cannot be loaded
        """
        loaders = {"RSA": RSAAlgorithm, "EC": ECAlgorithm}
        loader = loaders.get(self.kty)
        if loader is None:
            raise MalformedKeySetError(f"Unsupported key type '{self.kty}' for kid '{self.kid}'")
        try:
            return loader.from_jwk(json.dumps(self.to_dict()))
        except Exception as e:
            raise MalformedKeySetError(f"Invalid key material for kid '{self.kid}': {e}") from e


@dataclass(frozen=True)
class KeySet:
    """Immutable snapshot of a provider's published keys."""

    keys: Tuple[JWK, ...] = ()
    _by_kid: Mapping[str, JWK] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_kid: Dict[str, JWK] = {}
        for key in self.keys:
            if key.kid in by_kid:
                raise MalformedKeySetError(f"Duplicate kid '{key.kid}' in key set")
            by_kid[key.kid] = key
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "_by_kid", by_kid)

    @classmethod
    def from_jwks(cls, document: Any) -> "KeySet":
        """Deserialize a JWKS document (``{"keys": [...]}``).

        Raises:
            MalformedKeySetError: If the document does not match the JWKS schema
        """
        if not isinstance(document, dict):
            raise MalformedKeySetError("JWKS document is not an object")
        keys = document.get("keys")
        if not isinstance(keys, list):
            raise MalformedKeySetError("JWKS document missing keys list")
        return cls(keys=tuple(JWK.from_dict(k) for k in keys))

    def find(self, kid: str) -> Optional[JWK]:
        return self._by_kid.get(kid)

    @property
    def kids(self) -> Tuple[str, ...]:
        return tuple(key.kid for key in self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, kid: object) -> bool:
        return kid in self._by_kid


@dataclass(frozen=True)
class CacheEntry:
    """A key set together with the time it was fetched."""

    key_set: KeySet
    fetched_at: float


@dataclass(frozen=True)
class TokenHeader:
    """JOSE header of a token. Untrusted until the signature verifies."""

    alg: str
    kid: str
    typ: Optional[str] = None


@dataclass(frozen=True)
class ParsedToken:
    """Segments of a compact token, decoded but NOT verified."""

    header: TokenHeader
    unverified_claims: Mapping[str, Any]
    signature: bytes
    signing_input: bytes


@dataclass(frozen=True)
class Claims:
    """Claims of a validated token.

    Only built by a verifier after the signature has been checked.
    """

    iss: str
    aud: Union[str, Tuple[str, ...]]
    exp: int
    sub: Optional[str] = None
    nbf: Optional[int] = None
    iat: Optional[int] = None
    extra: Mapping[str, Any] = field(default_factory=dict)
    raw_claims: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Claims":
        aud = payload.get("aud")
        if isinstance(aud, list):
            aud = tuple(aud)
        standard = ("iss", "aud", "exp", "sub", "nbf", "iat")
        return cls(
            iss=payload.get("iss"),
            aud=aud,
            exp=payload.get("exp"),
            sub=payload.get("sub"),
            nbf=payload.get("nbf"),
            iat=payload.get("iat"),
            extra={k: v for k, v in payload.items() if k not in standard},
            raw_claims=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the full payload."""
        if self.raw_claims:
            return dict(self.raw_claims)
        data: Dict[str, Any] = {
            "iss": self.iss,
            "aud": list(self.aud) if isinstance(self.aud, tuple) else self.aud,
            "exp": self.exp,
        }
        for name in ("sub", "nbf", "iat"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data.update(self.extra)
        return data

    @property
    def audiences(self) -> Tuple[str, ...]:
        if isinstance(self.aud, tuple):
            return self.aud
        return (self.aud,)

    # Azure AD specific claims

    @property
    def tenant_id(self) -> Optional[str]:
        return self.extra.get("tid")

    @property
    def object_id(self) -> Optional[str]:
        return self.extra.get("oid")

    @property
    def preferred_username(self) -> Optional[str]:
        return self.extra.get("preferred_username")

    @property
    def name(self) -> Optional[str]:
        return self.extra.get("name")

    @property
    def version(self) -> Optional[str]:
        return self.extra.get("ver")

    @property
    def roles(self) -> Tuple[str, ...]:
        return tuple(self.extra.get("roles") or ())

    @property
    def scopes(self) -> Tuple[str, ...]:
        """Delegated scopes from the space separated ``scp`` claim."""
        scp = self.extra.get("scp")
        return tuple(scp.split()) if isinstance(scp, str) else ()


@dataclass(frozen=True)
class ProviderMetadata:
    """The parts of an OpenID discovery document we rely on."""

    issuer: Optional[str]
    jwks_uri: str


@dataclass
class TenantConfig:
    """Configuration for one Azure AD tenant/application.

    ``client_id`` is the application ID that tokens must carry in ``aud``.
    """

    tenant_id: str
    client_id: str
    authority: str = DEFAULT_AUTHORITY
    version: Optional[str] = DEFAULT_VERSION
    jwks_uri: Optional[str] = None  # skips the discovery document when set

    @property
    def discovery_url(self) -> str:
        version = f"/{self.version}" if self.version and self.version != "v1.0" else ""
        return f"https://{self.authority}/{self.tenant_id}{version}/.well-known/openid-configuration"

    @property
    def issuer(self) -> str:
        # v1.0 tokens are issued by sts.windows.net
        if self.version and self.version != "v1.0":
            return f"https://{self.authority}/{self.tenant_id}/{self.version}"
        return f"https://sts.windows.net/{self.tenant_id}/"

    @classmethod
    def from_env(cls) -> "TenantConfig":
        """Build a config from AZURE_* environment variables.

        Raises:
            ValueError: If AZURE_TENANT_ID or AZURE_CLIENT_ID is not set
        """
        tenant_id = os.getenv("AZURE_TENANT_ID")
        client_id = os.getenv("AZURE_CLIENT_ID")
        if not tenant_id or not client_id:
            raise ValueError("AZURE_TENANT_ID and AZURE_CLIENT_ID must be set")
        return cls(
            tenant_id=tenant_id,
            client_id=client_id,
            authority=os.getenv("AZURE_AUTHORITY", DEFAULT_AUTHORITY),
            version=os.getenv("AZURE_TOKEN_VERSION", DEFAULT_VERSION),
            jwks_uri=os.getenv("AZURE_JWKS_URI") or None,
        )
