# src/edutrack/api/routers/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.app_logger import get_logger
from edutrack.auth.deps import get_current_user, is_admin, require_auth
from edutrack.auth.tokens import create_access_token
from edutrack.core.config import settings
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.users import ChangePasswordIn, LoginIn, RegisterIn, TokenOut, UserOut
from edutrack.services import accounts

log = get_logger("routers.auth")
router = APIRouter(prefix="/auth", tags=["auth"])


def _mask_email(email: Optional[str]) -> str:
    if not email:
        return ""
    user, _, domain = email.partition("@")
    if not domain:
        return "***"
    head = user[:2]
    tail = user[-1:] if len(user) > 2 else ""
    return f"{head}***{tail}@{domain}"


def _token_response(user: User) -> TokenOut:
    token, expires_in = create_access_token(user.id, role=user.role)
    return TokenOut(access_token=token, expires_in=expires_in, user=UserOut.model_validate(user))


async def _login(db: AsyncSession, email: str, password: str) -> TokenOut:
    user = await accounts.authenticate(db, email, password)
    if user is None:
        log.info("failed login for %s", _mask_email(email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    log.info("login ok for %s (%s)", _mask_email(email), user.role)
    return _token_response(user)


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterIn,
    db: AsyncSession = Depends(get_session),
    caller: Optional[User] = Depends(get_current_user),
):
    """Create an account and its role record, then sign the new user in."""
    user = await accounts.create_account(
        db,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        student_name=payload.student_name,
        student_grade=payload.student_grade,
        link_student_id=payload.link_student_id,
        teacher_name=payload.teacher_name,
        teacher_subject_ids=payload.teacher_subject_ids,
        allow_admin=settings.ALLOW_ADMIN_REGISTRATION or (caller is not None and is_admin(caller)),
    )
    return _token_response(user)


@router.post("/token", response_model=TokenOut)
async def token(form: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_session)):
    # OAuth2 password flow; "username" carries the email
    return await _login(db, form.username, form.password)


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_session)):
    return await _login(db, payload.email, payload.password)


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(require_auth)):
    return user


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: ChangePasswordIn,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    await accounts.change_password(db, user, payload.current_password, payload.new_password)
