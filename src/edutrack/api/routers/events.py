# src/edutrack/api/routers/events.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_admin, require_auth
from edutrack.core.config import settings
from edutrack.db.models import SchoolEvent, User
from edutrack.db.session import get_session
from edutrack.schemas.events import EventCreate, EventOut, EventUpdate
from edutrack.services import events as event_service
from edutrack.services.common import get_or_404
from edutrack.services.errors import NotFoundError

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventOut])
async def list_events(
    year: Optional[int] = Query(None, ge=1, le=9999),
    term: Optional[int] = Query(None, ge=1, le=3),
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
    limit: int = Query(settings.PAGE_SIZE_EVENTS, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    """Events whose audience includes the caller's role, oldest first."""
    return await event_service.list_events(
        db, role=user.role, year=year, term=term, start=start, end=end, limit=limit, offset=offset
    )


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await event_service.create_event(
        db, title=payload.title, date=payload.date, description=payload.description, audience=payload.audience
    )


@router.get("/{event_id}", response_model=EventOut)
async def get_event(
    event_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    ev = await get_or_404(db, SchoolEvent, event_id, "Event")
    if not event_service.visible_to(ev, user.role):
        # hidden events look the same as missing ones
        raise NotFoundError("Event", event_id)
    return ev


@router.api_route("/{event_id}", methods=["PUT", "PATCH"], response_model=EventOut)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await event_service.update_event(db, event_id, payload.changes())


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_event(
    event_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    await event_service.delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
