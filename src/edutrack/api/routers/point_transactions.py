# src/edutrack/api/routers/point_transactions.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import ensure_can_view_student, is_staff, require_auth
from edutrack.core.config import settings
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.points import PointTransactionOut
from edutrack.services import students as student_service

router = APIRouter(prefix="/point-transactions", tags=["points"])


@router.get("", response_model=list[PointTransactionOut])
async def list_point_transactions(
    student_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    limit: int = Query(settings.PAGE_SIZE_POINT_TRANSACTIONS, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    if not is_staff(user):
        student_id = student_id or user.student_id or ""
        ensure_can_view_student(user, student_id)
    return await student_service.list_transactions(
        db, student_id=student_id, teacher_id=teacher_id, limit=limit, offset=offset
    )
