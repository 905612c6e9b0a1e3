from __future__ import annotations

import base64
from datetime import timedelta
import hashlib
import hmac
import json
import secrets
import time
from typing import Optional, Tuple

PBKDF2_ITERATIONS = 200_000
_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return f"{_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        scheme, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != _SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), rounds)
    return hmac.compare_digest(digest.hex(), expected)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _sign(payload: str, secret: str) -> str:
    return _b64encode(hmac.new(secret.encode("utf-8"), payload.encode("ascii"), hashlib.sha256).digest())


def issue_token(account_id: int, username: str, secret: str, ttl: timedelta, now: Optional[float] = None) -> str:
    """Session token: base64url JSON payload and its HMAC-SHA256 signature, dot-separated."""
    issued = time.time() if now is None else now
    body = {"sub": account_id, "name": username, "exp": int(issued + ttl.total_seconds())}
    payload = _b64encode(json.dumps(body, separators=(",", ":")).encode("utf-8"))
    return f"{payload}.{_sign(payload, secret)}"


def verify_token(token: str, secret: str, now: Optional[float] = None) -> Optional[Tuple[int, str]]:
    """(account_id, username) for a valid unexpired token, else None."""
    if not token.isascii():
        return None
    payload, sep, signature = token.partition(".")
    if not sep or not payload or not signature:
        return None
    if not hmac.compare_digest(_sign(payload, secret), signature):
        return None
    try:
        body = json.loads(_b64decode(payload))
        account_id = int(body["sub"])
        username = str(body["name"])
        expires = int(body["exp"])
    except (ValueError, KeyError, TypeError):
        return None
    current = time.time() if now is None else now
    if current >= expires:
        return None
    return account_id, username


def generate_secret() -> str:
    return secrets.token_urlsafe(32)
