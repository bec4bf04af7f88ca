# src/edutrack/services/students.py
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import (
    AttendanceStatus,
    Grade,
    PointRuleSuggestion,
    PointTransaction,
    SchoolClass,
    Student,
    User,
    UserRole,
)

from .common import get_or_404, unique_code, without
from .errors import ValidationError

log = logging.getLogger(__name__)


async def list_students(
    db: AsyncSession,
    *,
    q: Optional[str] = None,
    grade: Optional[int] = None,
    ids: Optional[Iterable[str]] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Student]:
    stmt = sa.select(Student)
    if q:
        like = f"%{q.strip()}%"
        stmt = stmt.where(sa.or_(Student.name.ilike(like), Student.id.ilike(like)))
    if grade is not None:
        stmt = stmt.where(Student.grade == grade)
    if ids is not None:
        stmt = stmt.where(Student.id.in_(list(ids)))
    stmt = stmt.order_by(Student.name, Student.id).limit(limit).offset(offset)
    return list((await db.scalars(stmt)).all())


async def create_student(db: AsyncSession, *, name: str, grade: int, points: int = 0,
                         parent_id: Optional[str] = None) -> Student:
    student = Student(
        id=await unique_code(db, Student, "ST"),
        name=name,
        grade=grade,
        points=points,
        parent_id=parent_id,
        attendance=[],
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)
    log.info("created student %s (%s)", student.id, student.name)
    return student


async def update_student(db: AsyncSession, student_id: str, changes: dict) -> Student:
    student = await get_or_404(db, Student, student_id, "Student")
    for key, value in changes.items():
        setattr(student, key, value)
    await db.commit()
    await db.refresh(student)
    return student


async def delete_student(db: AsyncSession, student_id: str) -> None:
    """
    Delete a student and everything hanging off it: class memberships,
    grades, point history and suggestions. Linked logins are unlinked.
    """
    student = await get_or_404(db, Student, student_id, "Student")

    classes = (await db.scalars(sa.select(SchoolClass))).all()
    for cls in classes:
        if student_id in (cls.student_ids or []):
            cls.student_ids = without(cls.student_ids, student_id)

    await db.execute(sa.delete(Grade).where(Grade.student_id == student_id))
    await db.execute(sa.delete(PointTransaction).where(PointTransaction.student_id == student_id))
    await db.execute(sa.delete(PointRuleSuggestion).where(PointRuleSuggestion.student_id == student_id))
    # parent logins keep existing but lose the link; student logins are removed
    await db.execute(
        sa.update(User)
        .where(User.student_id == student_id, User.role == UserRole.PARENT.value)
        .values(student_id=None)
    )
    await db.execute(
        sa.delete(User).where(User.student_id == student_id, User.role == UserRole.STUDENT.value)
    )

    await db.delete(student)
    await db.commit()
    log.info("deleted student %s", student_id)


def _with_attendance(records: list[dict] | None, day: date, status: AttendanceStatus | str) -> list[dict]:
    """Replace any same-day record; keep the list ordered by date."""
    key = day.isoformat()
    kept = [r for r in (records or []) if r.get("date") != key]
    kept.append({"date": key, "status": AttendanceStatus(status).value})
    return sorted(kept, key=lambda r: r["date"])


async def mark_attendance(db: AsyncSession, student_id: str, day: date,
                          status: AttendanceStatus | str) -> Student:
    student = await get_or_404(db, Student, student_id, "Student")
    student.attendance = _with_attendance(student.attendance, day, status)
    await db.commit()
    await db.refresh(student)
    return student


async def record_class_attendance(
    db: AsyncSession,
    class_id: str,
    day: date,
    records: list[tuple[str, AttendanceStatus | str]],
) -> list[Student]:
    """Mark attendance for several students of one class on one day."""
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    enrolled = set(cls.student_ids or [])
    strangers = [sid for sid, _ in records if sid not in enrolled]
    if strangers:
        raise ValidationError(
            "Some students are not enrolled in this class.",
            context={"class_id": class_id, "student_ids": strangers},
        )

    updated = []
    for sid, status in records:
        student = await get_or_404(db, Student, sid, "Student")
        student.attendance = _with_attendance(student.attendance, day, status)
        updated.append(student)
    await db.commit()
    for student in updated:
        await db.refresh(student)
    log.info("attendance for class %s on %s: %d records", class_id, day, len(updated))
    return updated


async def award_points(
    db: AsyncSession,
    student_id: str,
    *,
    points: int,
    reason: str,
    teacher_id: str,
    on: Optional[date] = None,
    commit: bool = True,
) -> PointTransaction:
    """Add to the student's total and record the transaction (dated today by default)."""
    student = await get_or_404(db, Student, student_id, "Student")
    student.points = (student.points or 0) + points
    tx = PointTransaction(
        student_id=student_id,
        teacher_id=teacher_id,
        points=points,
        reason=reason,
        date=on or date.today(),
    )
    db.add(tx)
    if commit:
        await db.commit()
        await db.refresh(tx)
    log.info("awarded %d points to %s by %s", points, student_id, teacher_id)
    return tx


async def list_transactions(
    db: AsyncSession,
    *,
    student_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[PointTransaction]:
    stmt = sa.select(PointTransaction)
    if student_id:
        stmt = stmt.where(PointTransaction.student_id == student_id)
    if teacher_id:
        stmt = stmt.where(PointTransaction.teacher_id == teacher_id)
    stmt = stmt.order_by(PointTransaction.date.desc(), PointTransaction.id).limit(limit).offset(offset)
    return list((await db.scalars(stmt)).all())
