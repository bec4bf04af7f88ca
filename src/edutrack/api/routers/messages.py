# src/edutrack/api/routers/messages.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_auth
from edutrack.core.config import settings
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.messages import MessageCreate, MessageOut, UnreadCountOut
from edutrack.services import messages as message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await message_service.send_message(
        db, user, recipient_id=payload.recipient_id, subject=payload.subject, body=payload.body
    )


@router.get("/inbox", response_model=list[MessageOut])
async def inbox(
    unread_only: bool = False,
    limit: int = Query(settings.PAGE_SIZE_MESSAGES, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await message_service.inbox(db, user, unread_only=unread_only, limit=limit, offset=offset)


@router.get("/sent", response_model=list[MessageOut])
async def sent(
    limit: int = Query(settings.PAGE_SIZE_MESSAGES, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await message_service.sent(db, user, limit=limit, offset=offset)


@router.get("/unread-count", response_model=UnreadCountOut)
async def unread_count(db: AsyncSession = Depends(get_session), user: User = Depends(require_auth)):
    return UnreadCountOut(unread=await message_service.unread_count(db, user))


@router.get("/{message_id}", response_model=MessageOut)
async def get_message(
    message_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await message_service.get_message(db, user, message_id)


@router.post("/{message_id}/read", response_model=MessageOut)
async def mark_read(
    message_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await message_service.mark_read(db, user, message_id)
