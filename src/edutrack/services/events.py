"""
School events, plus importing the generated Liberian calendar into them.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import SchoolEvent, UserRole

from .common import get_or_404
from .liberian_calendar import events_in_term, generate_school_events

log = logging.getLogger(__name__)


def _audience_value(audience):
    if audience is None or audience == "all":
        return "all"
    return [getattr(r, "value", r) for r in audience]


def visible_to(event: SchoolEvent, role: Optional[str]) -> bool:
    """Admins see everything; others see 'all' events and ones naming their role."""
    if role is None or role == UserRole.ADMIN.value:
        return True
    audience = event.audience
    return audience == "all" or role in (audience or [])


async def list_events(
    db: AsyncSession,
    *,
    role: Optional[str] = None,
    year: Optional[int] = None,
    term: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[SchoolEvent]:
    stmt = sa.select(SchoolEvent)
    if year is not None:
        stmt = stmt.where(SchoolEvent.date >= date(year, 1, 1), SchoolEvent.date <= date(year, 12, 31))
    if start is not None:
        stmt = stmt.where(SchoolEvent.date >= start)
    if end is not None:
        stmt = stmt.where(SchoolEvent.date <= end)
    stmt = stmt.order_by(SchoolEvent.date, SchoolEvent.id)
    rows = [ev for ev in (await db.scalars(stmt)).all() if visible_to(ev, role)]
    if term is not None:
        rows = events_in_term(rows, term)
    rows = rows[offset:]
    return rows[:limit] if limit is not None else rows


async def create_event(db: AsyncSession, *, title: str, date: date, description: str = "",
                       audience="all", event_id: Optional[str] = None) -> SchoolEvent:
    ev = SchoolEvent(title=title, date=date, description=description, audience=_audience_value(audience))
    if event_id:
        ev.id = event_id
    db.add(ev)
    await db.commit()
    await db.refresh(ev)
    return ev


async def update_event(db: AsyncSession, event_id: str, changes: dict) -> SchoolEvent:
    ev = await get_or_404(db, SchoolEvent, event_id, "Event")
    for key, value in changes.items():
        if key == "audience":
            value = _audience_value(value)
        setattr(ev, key, value)
    await db.commit()
    await db.refresh(ev)
    return ev


async def delete_event(db: AsyncSession, event_id: str) -> None:
    ev = await get_or_404(db, SchoolEvent, event_id, "Event")
    await db.delete(ev)
    await db.commit()


async def import_liberian_calendar(db: AsyncSession, year: int) -> tuple[int, int]:
    """
    Upsert the year's holidays and cultural events. Ids are ``<key>_<year>``,
    so importing twice updates in place. Returns ``(created, updated)``.
    """
    created = updated = 0
    for item in generate_school_events(year):
        ev = await db.get(SchoolEvent, item.id)
        if ev is None:
            db.add(SchoolEvent(id=item.id, title=item.title, date=item.date,
                               description=item.description, audience=item.audience))
            created += 1
        else:
            ev.title, ev.date, ev.description, ev.audience = (
                item.title, item.date, item.description, item.audience
            )
            updated += 1
    await db.commit()
    log.info("imported Liberian calendar %d: %d created, %d updated", year, created, updated)
    return created, updated
