# src/edutrack/api/routers/grades.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import ensure_can_view_student, is_staff, require_auth, require_staff, require_student
from edutrack.core.config import settings
from edutrack.db.models import Grade, GradeStatus, User, UserRole
from edutrack.db.session import get_session
from edutrack.schemas.grades import GradeCreate, GradeOut, GradeUpdate, SubmitToAdminIn
from edutrack.schemas.reports import GradesheetOut
from edutrack.services import classes as class_service
from edutrack.services import grades as grade_service
from edutrack.services import reports as report_service
from edutrack.services.common import get_or_404

router = APIRouter(prefix="/grades", tags=["grades"])


@router.get("", response_model=list[GradeOut])
async def list_grades(
    student_id: Optional[str] = None,
    class_id: Optional[str] = None,
    term: Optional[int] = Query(None, ge=1, le=3),
    grade_status: Optional[GradeStatus] = Query(None, alias="status"),
    limit: int = Query(settings.PAGE_SIZE_GRADES, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    """
    Admins see every grade, teachers the grades of classes they teach,
    students and parents only the (linked) student's own.
    """
    class_ids = None
    if user.role == UserRole.TEACHER.value:
        class_ids = [c.id for c in await class_service.list_classes(db, teacher_id=user.teacher_id)]
    elif not is_staff(user):
        if not user.student_id:
            return []
        student_id = user.student_id
    return await grade_service.list_grades(
        db,
        student_id=student_id,
        class_id=class_id,
        class_ids=class_ids,
        term=term,
        status=grade_status,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=GradeOut, status_code=status.HTTP_201_CREATED)
async def create_grade(
    payload: GradeCreate,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    return await grade_service.create_grade(db, user, payload.model_dump())


@router.post("/submit-to-admin")
async def submit_to_admin(
    payload: SubmitToAdminIn,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    """Hand a class's term results to the administration; they are then locked for teachers."""
    count = await grade_service.submit_term_to_admin(db, user, payload.class_id, payload.term)
    return {"class_id": payload.class_id, "term": payload.term, "submitted": count}


@router.get("/gradesheet", response_model=GradesheetOut)
async def master_gradesheet(
    class_id: Optional[str] = None,
    term: Optional[int] = Query(None, ge=1, le=3),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    """Term averages and WAEC standing per student, with class and subject summaries."""
    return await report_service.master_gradesheet(
        db,
        class_id=class_id,
        term=term,
        teacher_id=user.teacher_id,
        staff_is_admin=user.role == UserRole.ADMIN.value,
    )


@router.get("/{grade_id}", response_model=GradeOut)
async def get_grade(
    grade_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    grade = await get_or_404(db, Grade, grade_id, "Grade")
    ensure_can_view_student(user, grade.student_id)
    return grade


@router.api_route("/{grade_id}", methods=["PUT", "PATCH"], response_model=GradeOut)
async def update_grade(
    grade_id: str,
    payload: GradeUpdate,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    return await grade_service.update_grade(db, user, grade_id, payload.changes())


@router.delete("/{grade_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_grade(
    grade_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    await grade_service.delete_grade(db, user, grade_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{grade_id}/submit", response_model=GradeOut)
async def submit_assignment(
    grade_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_student),
):
    return await grade_service.submit_assignment(db, user, grade_id)
