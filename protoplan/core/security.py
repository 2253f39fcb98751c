import json
import time
import hmac
import hashlib
import base64
import secrets
from typing import Optional

from protoplan.core.config import settings


PBKDF2_ITERATIONS = 100_000


def _b64u_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64u_decode(data: str) -> bytes:
    padding = "=" * ((4 - len(data) % 4) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: str) -> str:
    digest = hmac.new(settings.SECRET_KEY.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return _b64u_encode(digest)


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS)
    return f"{salt}${dk.hex()}"


def verify_password(password: str, hashed: str) -> bool:
    if not hashed or "$" not in hashed:
        return False
    salt, hash_hex = hashed.split("$", 1)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk.hex(), hash_hex)


def create_access_token(subject: str, expires_seconds: Optional[int] = None) -> str:
    """Return a signed ``<payload>.<signature>`` token for the given user id."""
    if expires_seconds is None:
        expires_seconds = settings.ACCESS_TOKEN_EXPIRE_SECONDS
    now = int(time.time())
    payload = {
        "sub": str(subject),
        "iat": now,
        "exp": now + int(expires_seconds),
    }
    payload_enc = _b64u_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    return f"{payload_enc}.{_sign(payload_enc)}"


def verify_access_token(token: str) -> Optional[dict]:
    """Decode a token; None when malformed, tampered with, or expired."""
    # compare_digest raises TypeError on non-ASCII str
    if not token.isascii():
        return None
    parts = token.split(".")
    if len(parts) != 2:
        return None
    payload_enc, sig_enc = parts
    if not hmac.compare_digest(_sign(payload_enc), sig_enc):
        return None
    try:
        payload = json.loads(_b64u_decode(payload_enc))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict) or payload.get("exp", 0) <= int(time.time()):
        return None
    return payload
