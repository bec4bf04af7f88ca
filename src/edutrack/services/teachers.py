from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import DocumentResource, SchoolClass, Subject, Teacher, User

from .common import dedupe, get_or_404, missing_ids, unique_code, without
from .errors import ValidationError

log = logging.getLogger(__name__)


async def _check_subjects(db: AsyncSession, subject_ids: list[str]) -> list[str]:
    subject_ids = dedupe(subject_ids)
    unknown = await missing_ids(db, Subject, subject_ids)
    if unknown:
        raise ValidationError("Unknown subject ids.", context={"subject_ids": unknown})
    return subject_ids


async def create_teacher(db: AsyncSession, *, name: str, subject_ids: list[str],
                         user_id: Optional[str] = None) -> Teacher:
    teacher = Teacher(
        id=await unique_code(db, Teacher, "TC"),
        name=name,
        subject_ids=await _check_subjects(db, subject_ids),
        user_id=user_id,
    )
    db.add(teacher)
    await db.commit()
    await db.refresh(teacher)
    log.info("created teacher %s (%s)", teacher.id, teacher.name)
    return teacher


async def update_teacher(db: AsyncSession, teacher_id: str, changes: dict) -> Teacher:
    teacher = await get_or_404(db, Teacher, teacher_id, "Teacher")
    if "subject_ids" in changes:
        changes["subject_ids"] = await _check_subjects(db, changes["subject_ids"] or [])
    for key, value in changes.items():
        setattr(teacher, key, value)
    await db.commit()
    await db.refresh(teacher)
    return teacher


async def delete_teacher(db: AsyncSession, teacher_id: str) -> None:
    """Drop the teacher from every class and delete the resources they uploaded."""
    teacher = await get_or_404(db, Teacher, teacher_id, "Teacher")

    for cls in (await db.scalars(sa.select(SchoolClass))).all():
        if teacher_id in (cls.teacher_ids or []):
            cls.teacher_ids = without(cls.teacher_ids, teacher_id)

    # Resources record the uploading user's id
    owner_ids = [teacher_id] + ([teacher.user_id] if teacher.user_id else [])
    resources = (
        await db.scalars(sa.select(DocumentResource).where(DocumentResource.teacher_id.in_(owner_ids)))
    ).all()
    from .resources import remove_stored_file

    stored = [(res.storage_path, res.id) for res in resources]
    for res in resources:
        await db.delete(res)

    await db.execute(sa.update(User).where(User.teacher_id == teacher_id).values(teacher_id=None))
    await db.delete(teacher)
    await db.commit()
    for path, res_id in stored:
        remove_stored_file(path, res_id)
    log.info("deleted teacher %s (%d resources removed)", teacher_id, len(resources))


async def teacher_for_user(db: AsyncSession, user: User) -> Optional[Teacher]:
    if user.teacher_id:
        return await db.get(Teacher, user.teacher_id)
    return await db.scalar(sa.select(Teacher).where(Teacher.user_id == user.id))
