# src/edutrack/services/grades.py
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import Grade, GradeStatus, SchoolClass, Student, User, UserRole

from .common import get_or_404
from .errors import ConflictError, PermissionDeniedError, ValidationError
from .liberian_grading import calculate_final_grade, percentage_to_grade

log = logging.getLogger(__name__)

_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%?\s*$")
_FRACTION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$")


def score_percentage(score: Optional[str], max_score: Optional[str] = None) -> Optional[float]:
    """
    Percentage for plain numeric scores: ``"78"``, ``"78%"``, ``"18/20"``, or
    ``"18"`` with max ``"20"``. Letter grades and free text give None.
    """
    if not score:
        return None
    m = _FRACTION.match(score)
    if m:
        num, den = float(m.group(1)), float(m.group(2))
        return num / den * 100 if den else None
    m = _NUMBER.match(score)
    if not m:
        return None
    value = float(m.group(1))
    if max_score:
        mm = _NUMBER.match(max_score)
        if mm and float(mm.group(1)) > 0:
            return value / float(mm.group(1)) * 100
    return value


def apply_liberian_grade(grade: Grade) -> None:
    """Fill score / liberian_grade from the CA and exam components, or from a numeric score."""
    if grade.continuous_assessment is not None and grade.external_examination is not None:
        final = calculate_final_grade(grade.continuous_assessment, grade.external_examination)
        grade.score = str(final.final_score)
        grade.max_score = "100"
        grade.liberian_grade = final.liberian_grade
        return
    pct = score_percentage(grade.score, grade.max_score)
    grade.liberian_grade = percentage_to_grade(pct) if pct is not None else None


async def _check_teacher_scope(db: AsyncSession, user: User, cls: SchoolClass) -> None:
    if user.role == UserRole.ADMIN.value:
        return
    if user.role != UserRole.TEACHER.value or user.teacher_id not in (cls.teacher_ids or []):
        raise PermissionDeniedError(
            "Only teachers of this class can manage its grades.", context={"class_id": cls.id}
        )


async def list_grades(
    db: AsyncSession,
    *,
    student_id: Optional[str] = None,
    class_id: Optional[str] = None,
    class_ids: Optional[list[str]] = None,
    term: Optional[int] = None,
    status: Optional[GradeStatus] = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Grade]:
    stmt = sa.select(Grade)
    if student_id:
        stmt = stmt.where(Grade.student_id == student_id)
    if class_id:
        stmt = stmt.where(Grade.class_id == class_id)
    if class_ids is not None:
        stmt = stmt.where(Grade.class_id.in_(class_ids))
    if term is not None:
        stmt = stmt.where(Grade.term == term)
    if status is not None:
        stmt = stmt.where(Grade.status == GradeStatus(status).value)
    stmt = stmt.order_by(Grade.date_assigned.desc(), Grade.id).limit(limit).offset(offset)
    return list((await db.scalars(stmt)).all())


async def create_grade(db: AsyncSession, user: User, data: dict) -> Grade:
    cls = await get_or_404(db, SchoolClass, data["class_id"], "Class")
    await get_or_404(db, Student, data["student_id"], "Student")
    await _check_teacher_scope(db, user, cls)
    if data["student_id"] not in (cls.student_ids or []):
        raise ValidationError(
            "Student is not enrolled in this class.",
            context={"student_id": data["student_id"], "class_id": cls.id},
        )

    status = data.get("status")
    grade = Grade(**{**data, "status": GradeStatus(status).value if status else GradeStatus.GRADED.value})
    apply_liberian_grade(grade)
    db.add(grade)
    await db.commit()
    await db.refresh(grade)
    log.info("grade %s recorded for %s in %s", grade.id, grade.student_id, grade.class_id)
    return grade


async def update_grade(db: AsyncSession, user: User, grade_id: str, changes: dict) -> Grade:
    grade = await get_or_404(db, Grade, grade_id, "Grade")
    cls = await get_or_404(db, SchoolClass, grade.class_id, "Class")
    await _check_teacher_scope(db, user, cls)
    if grade.submitted_to_admin and user.role != UserRole.ADMIN.value:
        raise ConflictError("Grade has already been submitted to the administration.")

    for key, value in changes.items():
        if key == "status" and value is not None:
            value = GradeStatus(value).value
        setattr(grade, key, value)
    if grade.due_date and grade.date_assigned and grade.due_date < grade.date_assigned:
        raise ValidationError("due_date cannot be before date_assigned")
    apply_liberian_grade(grade)
    await db.commit()
    await db.refresh(grade)
    return grade


async def delete_grade(db: AsyncSession, user: User, grade_id: str) -> None:
    grade = await get_or_404(db, Grade, grade_id, "Grade")
    cls = await db.get(SchoolClass, grade.class_id)
    if cls is not None:
        await _check_teacher_scope(db, user, cls)
    elif user.role != UserRole.ADMIN.value:
        raise PermissionDeniedError("Only administrators can remove orphaned grades.")
    await db.delete(grade)
    await db.commit()


async def submit_assignment(db: AsyncSession, user: User, grade_id: str,
                            now: Optional[datetime] = None) -> Grade:
    """A student hands in their own assignment."""
    grade = await get_or_404(db, Grade, grade_id, "Grade")
    if user.role != UserRole.STUDENT.value or user.student_id != grade.student_id:
        raise PermissionDeniedError("You can only submit your own assignments.")
    if grade.status == GradeStatus.GRADED.value:
        raise ConflictError("This assignment has already been graded.")
    grade.status = GradeStatus.SUBMITTED.value
    grade.submission_date = now or datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(grade)
    log.info("assignment %s submitted by %s", grade_id, grade.student_id)
    return grade


async def submit_term_to_admin(db: AsyncSession, user: User, class_id: str, term: int) -> int:
    """Flag a class's term results as handed to the administration; returns the row count."""
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    await _check_teacher_scope(db, user, cls)
    result = await db.execute(
        sa.update(Grade)
        .where(Grade.class_id == class_id, Grade.term == term)
        .values(submitted_to_admin=True)
    )
    await db.commit()
    count = result.rowcount or 0
    log.info("class %s term %d submitted to admin (%d grades)", class_id, term, count)
    return count
