# src/edutrack/auth/tokens.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from edutrack.app_logger import get_logger
from edutrack.core.config import settings

log = get_logger("auth.tokens")


class TokenError(Exception):
    """Raised when an access token is missing, malformed or expired."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    subject: str,
    *,
    role: str,
    expires_minutes: Optional[int] = None,
    extra: Optional[dict[str, Any]] = None,
) -> tuple[str, int]:
    """Return ``(token, expires_in_seconds)`` for a user id."""
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    issued = _now()
    claims: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=minutes)).timestamp()),
        "iss": settings.APP_NAME,
    }
    if extra:
        claims.update(extra)
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, minutes * 60


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.APP_NAME,
        )
    except ExpiredSignatureError as e:
        raise TokenError("Token expired") from e
    except JWTError as e:
        log.debug("JWT decode failed: %s", e)
        raise TokenError("Invalid token") from e
    if not claims.get("sub"):
        raise TokenError("Token has no subject")
    return claims
