"""Bearer tokens for signed-in users.

Compact HS256 JWTs with claims ``{user_id, root_folder, iat, exp}``. Older
clients hold tokens that carry the user id as a string ``sub`` claim and no
root folder; those still decode, with ``root_folder`` left as ``None``.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SUPPORTED_ALGORITHM = "HS256"

_HEADER = {"alg": SUPPORTED_ALGORITHM, "typ": "JWT"}


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    root_folder: Optional[int]
    exp: datetime

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> Optional["TokenPayload"]:
        """Build a payload from verified claims, or None if no user id is present."""
        raw_user = claims.get("user_id", claims.get("sub"))
        if raw_user is None:
            return None
        root_folder = claims.get("root_folder")
        return cls(
            user_id=int(raw_user),
            root_folder=int(root_folder) if root_folder is not None else None,
            exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )


def create_token(
    user_id: int,
    root_folder: Optional[int],
    secret: str,
    algorithm: str = SUPPORTED_ALGORITHM,
    expires_hours: int = 24,
) -> str:
    """Sign a token for *user_id*.

    Args:
        user_id: Principal the token speaks for.
        root_folder: Id of the user's root folder, echoed back to clients.
        secret: Verification key shared with ``decode_token``.
        algorithm: Only HS256 supported.
        expires_hours: Lifetime; negative values yield an already-expired token.
    """
    if algorithm != SUPPORTED_ALGORITHM:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    issued_at = int(time.time())
    return _sign(
        {
            "user_id": user_id,
            "root_folder": root_folder,
            "iat": issued_at,
            "exp": issued_at + expires_hours * 3600,
        },
        secret,
    )


def decode_token(
    token: str, secret: str, algorithm: str = SUPPORTED_ALGORITHM
) -> Optional[TokenPayload]:
    """Verify *token* and return its payload, or None if it is unusable.

    Unusable covers a bad signature, expiry, malformed segments and a missing
    user id. Callers turn None into a 401.
    """
    if algorithm != SUPPORTED_ALGORITHM:
        return None
    try:
        claims = _verified_claims(token, secret)
        if claims is None or time.time() > claims.get("exp", 0):
            return None
        return TokenPayload.from_claims(claims)
    except (json.JSONDecodeError, KeyError, ValueError, TypeError, IndexError):
        return None


def _verified_claims(token: str, secret: str) -> Optional[Dict[str, Any]]:
    header_b64, sep1, rest = token.encode().partition(b".")
    claims_b64, sep2, signature_b64 = rest.partition(b".")
    if not (sep1 and sep2) or b"." in signature_b64:
        return None

    expected = _signature(header_b64 + b"." + claims_b64, secret)
    if not hmac.compare_digest(expected, _b64decode(signature_b64)):
        return None

    claims = json.loads(_b64decode(claims_b64))
    return claims if isinstance(claims, dict) else None


def _sign(claims: Dict[str, Any], secret: str) -> str:
    signing_input = _encode_json(_HEADER) + b"." + _encode_json(claims)
    return (signing_input + b"." + _b64encode(_signature(signing_input, secret))).decode()


def _signature(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _encode_json(obj: Dict[str, Any]) -> bytes:
    return _b64encode(json.dumps(obj, separators=(",", ":")).encode())


# base64url without padding

def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    return base64.urlsafe_b64decode(data + b"=" * (-len(data) % 4))
