from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import DocumentResource, Grade, SchoolClass, Student, Subject, Teacher, User

from .common import dedupe, get_or_404, missing_ids
from .errors import ValidationError

log = logging.getLogger(__name__)

_MEMBER_MODELS = {
    "teacher_ids": (Teacher, "teacher"),
    "student_ids": (Student, "student"),
    "subject_ids": (Subject, "subject"),
}


async def _checked(db: AsyncSession, field: str, ids: list[str]) -> list[str]:
    model, label = _MEMBER_MODELS[field]
    ids = dedupe(ids or [])
    unknown = await missing_ids(db, model, ids)
    if unknown:
        raise ValidationError(f"Unknown {label} ids.", context={field: unknown})
    return ids


async def list_classes(
    db: AsyncSession,
    *,
    teacher_id: Optional[str] = None,
    student_id: Optional[str] = None,
    subject_id: Optional[str] = None,
) -> list[SchoolClass]:
    # Membership lives in JSON lists, so filtering happens in Python.
    rows = (await db.scalars(sa.select(SchoolClass).order_by(SchoolClass.name))).all()
    out = []
    for cls in rows:
        if teacher_id and teacher_id not in (cls.teacher_ids or []):
            continue
        if student_id and student_id not in (cls.student_ids or []):
            continue
        if subject_id and subject_id not in (cls.subject_ids or []):
            continue
        out.append(cls)
    return out


async def classes_for_user(db: AsyncSession, user: User) -> list[SchoolClass]:
    if user.teacher_id:
        return await list_classes(db, teacher_id=user.teacher_id)
    if user.student_id:
        return await list_classes(db, student_id=user.student_id)
    return []


async def create_class(db: AsyncSession, *, name: str, description: str = "",
                       teacher_ids: list[str] = (), student_ids: list[str] = (),
                       subject_ids: list[str] = ()) -> SchoolClass:
    cls = SchoolClass(
        name=name,
        description=description,
        teacher_ids=await _checked(db, "teacher_ids", list(teacher_ids)),
        student_ids=await _checked(db, "student_ids", list(student_ids)),
        subject_ids=await _checked(db, "subject_ids", list(subject_ids)),
    )
    db.add(cls)
    await db.commit()
    await db.refresh(cls)
    log.info("created class %s (%s)", cls.id, cls.name)
    return cls


async def update_class(db: AsyncSession, class_id: str, changes: dict) -> SchoolClass:
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    for key, value in changes.items():
        if key in _MEMBER_MODELS:
            value = await _checked(db, key, value or [])
        setattr(cls, key, value)
    await db.commit()
    await db.refresh(cls)
    return cls


async def assign_teachers(db: AsyncSession, class_id: str, teacher_ids: list[str]) -> SchoolClass:
    return await update_class(db, class_id, {"teacher_ids": teacher_ids})


async def assign_students(db: AsyncSession, class_id: str, student_ids: list[str]) -> SchoolClass:
    return await update_class(db, class_id, {"student_ids": student_ids})


async def delete_class(db: AsyncSession, class_id: str) -> None:
    """Delete a class together with its grades and document resources."""
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    resources = (
        await db.scalars(sa.select(DocumentResource).where(DocumentResource.class_id == class_id))
    ).all()
    from .resources import remove_stored_file

    stored = [(res.storage_path, res.id) for res in resources]
    for res in resources:
        await db.delete(res)
    await db.execute(sa.delete(Grade).where(Grade.class_id == class_id))
    await db.delete(cls)
    await db.commit()
    for path, res_id in stored:
        remove_stored_file(path, res_id)
    log.info("deleted class %s", class_id)
