# src/edutrack/api/routers/students.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import (
    acting_teacher_id,
    ensure_can_view_student,
    require_admin,
    require_auth,
    require_staff,
)
from edutrack.core.config import settings
from edutrack.db.models import Student, User
from edutrack.db.session import get_session
from edutrack.schemas.grades import GradeOut
from edutrack.schemas.points import PointTransactionOut
from edutrack.schemas.students import (
    AttendanceIn,
    AwardPointsIn,
    StudentCreate,
    StudentOut,
    StudentUpdate,
)
from edutrack.services import grades as grade_service
from edutrack.services import students as student_service
from edutrack.services.common import get_or_404

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=list[StudentOut])
async def list_students(
    q: Optional[str] = Query(None, description="Search by name or id"),
    grade: Optional[int] = Query(None, ge=1, le=12),
    limit: int = Query(settings.PAGE_SIZE_STUDENTS, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_staff),
):
    return await student_service.list_students(db, q=q, grade=grade, limit=limit, offset=offset)


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await student_service.create_student(db, **payload.model_dump())


@router.get("/{student_id}", response_model=StudentOut)
async def get_student(
    student_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    ensure_can_view_student(user, student_id)
    return await get_or_404(db, Student, student_id, "Student")


@router.api_route("/{student_id}", methods=["PUT", "PATCH"], response_model=StudentOut)
async def update_student(
    student_id: str,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await student_service.update_student(db, student_id, payload.changes())


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_student(
    student_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    await student_service.delete_student(db, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{student_id}/attendance", response_model=StudentOut)
async def mark_attendance(
    student_id: str,
    payload: AttendanceIn,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_staff),
):
    """Record one day's attendance; an existing record for that day is replaced."""
    return await student_service.mark_attendance(db, student_id, payload.date, payload.status)


@router.post("/{student_id}/points", response_model=PointTransactionOut, status_code=status.HTTP_201_CREATED)
async def award_points(
    student_id: str,
    payload: AwardPointsIn,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    return await student_service.award_points(
        db, student_id, points=payload.points, reason=payload.reason, teacher_id=acting_teacher_id(user)
    )


@router.get("/{student_id}/transactions", response_model=list[PointTransactionOut])
async def student_transactions(
    student_id: str,
    limit: int = Query(settings.PAGE_SIZE_POINT_TRANSACTIONS, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    ensure_can_view_student(user, student_id)
    await get_or_404(db, Student, student_id, "Student")
    return await student_service.list_transactions(db, student_id=student_id, limit=limit, offset=offset)


@router.get("/{student_id}/grades", response_model=list[GradeOut])
async def student_grades(
    student_id: str,
    term: Optional[int] = Query(None, ge=1, le=3),
    limit: int = Query(settings.PAGE_SIZE_GRADES, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    ensure_can_view_student(user, student_id)
    await get_or_404(db, Student, student_id, "Student")
    return await grade_service.list_grades(db, student_id=student_id, term=term, limit=limit, offset=offset)
