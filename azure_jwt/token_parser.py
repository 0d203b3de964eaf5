"""Compact JWT parsing.

Splits a token into its header, payload and signature segments and decodes
them WITHOUT verifying anything. The result only tells a verifier which key
and algorithm to use; never make trust decisions on it.
"""

from __future__ import annotations

import binascii
import json
import re
from typing import Any, Optional

from jwt.utils import base64url_decode, base64url_encode

from azure_jwt.exceptions import MalformedTokenError
from azure_jwt.models import ParsedToken, TokenHeader

_BASE64URL = re.compile(r"^[A-Za-z0-9_-]*$")

BEARER_SCHEME = "bearer"


def _decode_segment(segment: str, name: str) -> bytes:
    if not segment or not _BASE64URL.match(segment) or len(segment) % 4 == 1:
        raise MalformedTokenError(f"Token {name} is not valid base64url")
    try:
        decoded = base64url_decode(segment)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"Token {name} is not valid base64url") from e
    # Unused trailing bits must be zero, so each byte string has one encoding
    if base64url_encode(decoded).decode("ascii") != segment:
        raise MalformedTokenError(f"Token {name} is not canonical base64url")
    return decoded


def _decode_json(data: bytes, name: str) -> dict:
    try:
        value: Any = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedTokenError(f"Token {name} is not valid JSON") from e
    if not isinstance(value, dict):
        raise MalformedTokenError(f"Token {name} is not a JSON object")
    return value


def parse(token: str) -> ParsedToken:
    """Split and decode a compact-serialized token.

    Args:
        token: ``base64url(header).base64url(payload).base64url(signature)``

    Returns:
        ParsedToken with the untrusted header, claims and raw signature

    Raises:
        MalformedTokenError: On wrong segment count, bad base64url, bad JSON,
            or a header without string ``alg`` and ``kid``
    """
    if not isinstance(token, str):
        raise MalformedTokenError("Token must be a string")

    segments = token.split(".")
    if len(segments) != 3:
        raise MalformedTokenError(f"Token must have 3 segments, got {len(segments)}")

    header_segment, payload_segment, signature_segment = segments
    header_data = _decode_json(_decode_segment(header_segment, "header"), "header")
    payload = _decode_json(_decode_segment(payload_segment, "payload"), "payload")
    signature = _decode_segment(signature_segment, "signature")

    alg = header_data.get("alg")
    kid = header_data.get("kid")
    typ = header_data.get("typ")
    if not isinstance(alg, str) or not alg:
        raise MalformedTokenError("Token header missing alg")
    if not isinstance(kid, str) or not kid:
        raise MalformedTokenError("Token header missing kid")
    if typ is not None and not isinstance(typ, str):
        raise MalformedTokenError("Token header has invalid typ")

    return ParsedToken(
        header=TokenHeader(alg=alg, kid=kid, typ=typ),
        unverified_claims=payload,
        signature=signature,
        signing_input=f"{header_segment}.{payload_segment}".encode("ascii"),
    )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization`` header value.

    Raises:
        MalformedTokenError: If the header is empty
    """
    value = (authorization or "").strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = credentials.strip()
    if not value:
        raise MalformedTokenError("Missing bearer token")
    return value
