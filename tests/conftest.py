"""Shared pytest fixtures for azure_jwt tests."""

import asyncio
import json
import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt.algorithms import ECAlgorithm, RSAAlgorithm

from azure_jwt.core.transport import HttpResponse, HttpTransport
from azure_jwt.models import KeySet

TENANT_ID = "72f988bf-86f1-41af-91ab-2d7cd011db47"
CLIENT_ID = "6e74172b-be56-4843-9ff4-e66a39bb12e3"
ISSUER = f"https://login.microsoftonline.com/{TENANT_ID}/v2.0"
DISCOVERY_URL = f"{ISSUER}/.well-known/openid-configuration"
JWKS_URI = f"https://login.microsoftonline.com/{TENANT_ID}/discovery/v2.0/keys"


class FakeTransport(HttpTransport):
    """In-memory HttpTransport recording every requested URL."""

    def __init__(self, responses=None, delay: float = 0):
        self.responses = dict(responses or {})
        self.delay = delay
        self.calls = []

    async def get_json(self, url: str, timeout: float) -> HttpResponse:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self.responses.get(url)
        if response is None:
            return HttpResponse(status_code=404)
        if isinstance(response, Exception):
            raise response
        return response


def public_jwk(private_key, kid: str, alg: str = "RS256") -> dict:
    """Build the JWKS entry an identity provider would publish for a key."""
    if isinstance(private_key, rsa.RSAPrivateKey):
        data = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    else:
        data = json.loads(ECAlgorithm.to_jwk(private_key.public_key()))
    data.pop("key_ops", None)
    data.update({"kid": kid, "use": "sig", "alg": alg})
    return data


def make_token(private_key, payload: dict, kid: str = "K1", alg: str = "RS256") -> str:
    return jwt.encode(payload, private_key, algorithm=alg, headers={"kid": kid})


@pytest.fixture(scope="session")
def rsa_key():
    """RSA signing key behind kid K1."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    """A second RSA key, used for rotation and wrong-key scenarios."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def now():
    return int(time.time())


@pytest.fixture
def claims_payload(now):
    """Payload of a valid Azure AD v2.0 token."""
    return {
        "iss": ISSUER,
        "aud": CLIENT_ID,
        "exp": now + 3600,
        "nbf": now - 60,
        "iat": now,
        "sub": "HKZpfaHyWadeOouYlitjrI-KffTm222X5rrV3xDqfKQ",
        "tid": TENANT_ID,
        "oid": "690222be-ff1a-4d56-abd1-7e4f7d38e474",
        "preferred_username": "abeli@microsoft.com",
        "name": "Abe Lincoln",
        "scp": "access_as_user User.Read",
        "ver": "2.0",
    }


@pytest.fixture
def jwks(rsa_key):
    return {"keys": [public_jwk(rsa_key, "K1")]}


@pytest.fixture
def key_set(jwks):
    return KeySet.from_jwks(jwks)


@pytest.fixture
def transport(jwks):
    """Transport serving the discovery document and JWKS of the test tenant."""
    return FakeTransport(
        {
            DISCOVERY_URL: HttpResponse(
                status_code=200,
                body={"issuer": ISSUER, "jwks_uri": JWKS_URI},
            ),
            JWKS_URI: HttpResponse(status_code=200, body=jwks),
        }
    )
