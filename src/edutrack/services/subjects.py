from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import SchoolClass, Subject, Teacher

from .common import get_or_404, without
from .errors import ConflictError

log = logging.getLogger(__name__)


async def create_subject(db: AsyncSession, *, name: str, description: Optional[str] = None,
                         subject_id: Optional[str] = None) -> Subject:
    if subject_id and await db.get(Subject, subject_id) is not None:
        raise ConflictError(f"Subject '{subject_id}' already exists", context={"id": subject_id})
    subject = Subject(name=name, description=description)
    if subject_id:
        subject.id = subject_id
    db.add(subject)
    await db.commit()
    await db.refresh(subject)
    return subject


async def update_subject(db: AsyncSession, subject_id: str, changes: dict) -> Subject:
    subject = await get_or_404(db, Subject, subject_id, "Subject")
    for key, value in changes.items():
        setattr(subject, key, value)
    await db.commit()
    await db.refresh(subject)
    return subject


async def delete_subject(db: AsyncSession, subject_id: str) -> None:
    """Delete a subject and remove it from classes and teacher qualifications."""
    subject = await get_or_404(db, Subject, subject_id, "Subject")
    for cls in (await db.scalars(sa.select(SchoolClass))).all():
        if subject_id in (cls.subject_ids or []):
            cls.subject_ids = without(cls.subject_ids, subject_id)
    for teacher in (await db.scalars(sa.select(Teacher))).all():
        if subject_id in (teacher.subject_ids or []):
            teacher.subject_ids = without(teacher.subject_ids, subject_id)
    await db.delete(subject)
    await db.commit()
    log.info("deleted subject %s", subject_id)
