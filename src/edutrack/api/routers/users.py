# src/edutrack/api/routers/users.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_admin, require_auth
from edutrack.db.models import User, UserRole
from edutrack.db.session import get_session
from edutrack.schemas.users import UserOut
from edutrack.services import accounts

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
async def list_users(
    role: Optional[UserRole] = None,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_auth),
):
    # Any signed-in user may look up recipients for messages.
    return await accounts.list_users(db, role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_session),
    admin: User = Depends(require_admin),
):
    await accounts.delete_user(db, user_id, acting_user_id=admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
