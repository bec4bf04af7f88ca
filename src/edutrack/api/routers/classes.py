# src/edutrack/api/routers/classes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import is_staff, require_admin, require_auth, require_staff
from edutrack.core.config import settings
from edutrack.db.models import SchoolClass, User, UserRole
from edutrack.db.session import get_session
from edutrack.schemas.classes import AssignIdsIn, ClassCreate, ClassOut, ClassUpdate
from edutrack.schemas.students import ClassAttendanceIn, StudentOut
from edutrack.services import classes as class_service
from edutrack.services import students as student_service
from edutrack.services.common import get_or_404
from edutrack.services.errors import PermissionDeniedError

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("", response_model=list[ClassOut])
async def list_classes(
    teacher_id: Optional[str] = None,
    student_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    mine: bool = Query(False, description="Only classes the caller teaches or attends"),
    limit: int = Query(settings.PAGE_SIZE_CLASSES, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    # students and parents only ever see their own (or their child's) classes
    if mine or not is_staff(user):
        rows = await class_service.classes_for_user(db, user)
    else:
        rows = await class_service.list_classes(
            db, teacher_id=teacher_id, student_id=student_id, subject_id=subject_id
        )
    return rows[offset:offset + limit]


@router.post("", response_model=ClassOut, status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassCreate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await class_service.create_class(db, **payload.model_dump())


@router.get("/{class_id}", response_model=ClassOut)
async def get_class(
    class_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    if not is_staff(user) and user.student_id not in (cls.student_ids or []):
        raise PermissionDeniedError("You are not a member of this class.")
    return cls


@router.api_route("/{class_id}", methods=["PUT", "PATCH"], response_model=ClassOut)
async def update_class(
    class_id: str,
    payload: ClassUpdate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await class_service.update_class(db, class_id, payload.changes())


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_class(
    class_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    await class_service.delete_class(db, class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{class_id}/teachers", response_model=ClassOut)
async def assign_teachers(
    class_id: str,
    payload: AssignIdsIn,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await class_service.assign_teachers(db, class_id, payload.ids)


@router.put("/{class_id}/students", response_model=ClassOut)
async def assign_students(
    class_id: str,
    payload: AssignIdsIn,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await class_service.assign_students(db, class_id, payload.ids)


@router.post("/{class_id}/attendance", response_model=list[StudentOut])
async def class_attendance(
    class_id: str,
    payload: ClassAttendanceIn,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    """Take attendance for several enrolled students on one date."""
    if user.role == UserRole.TEACHER.value:
        cls = await get_or_404(db, SchoolClass, class_id, "Class")
        if user.teacher_id not in (cls.teacher_ids or []):
            raise PermissionDeniedError("Only teachers of this class can take its attendance.")
    return await student_service.record_class_attendance(
        db, class_id, payload.date, [(r.student_id, r.status) for r in payload.records]
    )
