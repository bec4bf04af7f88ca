# src/edutrack/auth/deps.py
from __future__ import annotations

from typing import Optional, Sequence

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.app_logger import get_logger
from edutrack.auth.tokens import TokenError, decode_access_token
from edutrack.db.models import User, UserRole
from edutrack.db.session import get_session

log = get_logger("auth.deps")


class AuthError(HTTPException):
    def __init__(self, detail: str, code: int = status.HTTP_401_UNAUTHORIZED):
        headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
        super().__init__(status_code=code, detail=detail, headers=headers)


# ------------------------------------------------------------------------------
# OAuth dependencies
# ------------------------------------------------------------------------------
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> Optional[User]:
    if not token:
        return None
    try:
        claims = decode_access_token(token)
    except TokenError as e:
        raise AuthError(str(e)) from e

    user = await session.get(User, claims["sub"])
    if user is None:
        log.warning("token for unknown user id=%s", claims["sub"])
        raise AuthError("User no longer exists")
    return user


async def require_auth(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise AuthError("Not authenticated")
    return user


def require_roles(
    *,
    any_of: Sequence[UserRole | str] | None = None,
):
    """Dependency factory: the caller must hold one of ``any_of``."""
    allowed = {getattr(r, "value", r) for r in (any_of or [])}

    async def _dep(user: User = Depends(require_auth)) -> User:
        if allowed and user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Missing required role")
        return user

    return _dep


require_admin = require_roles(any_of=[UserRole.ADMIN])
require_staff = require_roles(any_of=[UserRole.ADMIN, UserRole.TEACHER])
require_student = require_roles(any_of=[UserRole.STUDENT])


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN.value


def is_staff(user: User) -> bool:
    return user.role in (UserRole.ADMIN.value, UserRole.TEACHER.value)


def ensure_can_view_student(user: User, student_id: str) -> None:
    """Staff see every student; students see themselves and parents their linked child."""
    if is_staff(user) or user.student_id == student_id:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this student")


def acting_teacher_id(user: User) -> str:
    # admins act under their own user id in point history and suggestions
    return user.teacher_id or user.id


__all__ = [
    "AuthError",
    "acting_teacher_id",
    "ensure_can_view_student",
    "get_current_user",
    "is_admin",
    "is_staff",
    "oauth2_scheme",
    "require_admin",
    "require_auth",
    "require_roles",
    "require_staff",
    "require_student",
]
