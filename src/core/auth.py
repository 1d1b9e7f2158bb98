"""Authentication utilities: password hashing, session tokens, operator token.

Sessions are server-side: the browser holds an opaque random token and the
database holds its SHA-256 hash, so a leaked table cannot be replayed.
"""
from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Optional

from passlib.context import CryptContext

# Salted PBKDF2-SHA256; passlib picks per-hash salts and encodes them in the hash.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# ---------------------------------------------------------------------------
# Password Hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password with a per-password salt."""
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never verify."""
    try:
        return _pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# Session Tokens
# ---------------------------------------------------------------------------

def create_session_token() -> tuple[str, str]:
    """
    Create a session token.

    Returns:
        Tuple of (raw_token, token_hash). raw_token goes into the cookie,
        token_hash is stored server-side.
    """
    raw_token = secrets.token_urlsafe(48)
    return raw_token, hash_session_token(raw_token)


def hash_session_token(raw_token: str) -> str:
    """Hash a raw session token for database lookup."""
    return hashlib.sha256(raw_token.encode()).hexdigest()


# ---------------------------------------------------------------------------
# Operator Token
# ---------------------------------------------------------------------------

def admin_token_matches(presented: Optional[str], configured: Optional[str]) -> bool:
    """Constant-time comparison; an unconfigured token never matches."""
    if not configured or not presented:
        return False
    return hmac.compare_digest(presented.encode(), configured.encode())
