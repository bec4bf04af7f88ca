# src/edutrack/api/routers/calendar.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_admin, require_auth
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.events import AcademicTermOut, CalendarEventOut, CalendarImportOut, CurrentTermOut
from edutrack.services import events as event_service
from edutrack.services import liberian_calendar as cal

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/terms", response_model=list[AcademicTermOut])
async def terms(_user: User = Depends(require_auth)):
    return list(cal.LIBERIAN_ACADEMIC_TERMS)


@router.get("/current-term", response_model=CurrentTermOut)
async def current_term(
    on: Optional[dt.date] = Query(None, description="Defaults to today"),
    _user: User = Depends(require_auth),
):
    day = on or dt.date.today()
    term = cal.term_for_date(day)
    return CurrentTermOut(
        date=day,
        in_session=term is not None,
        term=AcademicTermOut.model_validate(term) if term else None,
        next_term=AcademicTermOut.model_validate(cal.next_term(day)),
    )


@router.get("/{year}/events", response_model=list[CalendarEventOut])
async def year_events(
    year: int = Path(..., ge=1, le=9999),
    term: Optional[int] = Query(None, ge=1, le=3),
    _user: User = Depends(require_auth),
):
    """Generated national holidays and cultural events; nothing is stored."""
    events = cal.generate_school_events(year)
    if term is not None:
        events = cal.events_in_term(events, term)
    return events


@router.post("/{year}/import", response_model=CalendarImportOut)
async def import_year(
    year: int = Path(..., ge=1, le=9999),
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    created, updated = await event_service.import_liberian_calendar(db, year)
    return CalendarImportOut(year=year, created=created, updated=updated)
