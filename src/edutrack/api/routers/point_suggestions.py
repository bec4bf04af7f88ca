# src/edutrack/api/routers/point_suggestions.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.app_logger import get_logger
from edutrack.auth.deps import acting_teacher_id, is_admin, require_staff
from edutrack.db.models import PointRuleSuggestion, SchoolClass, User
from edutrack.db.session import get_session
from edutrack.schemas.points import GenerateSuggestionsIn, GenerateSuggestionsOut, SuggestionOut
from edutrack.services import point_suggestions as suggestion_service
from edutrack.services.common import get_or_404
from edutrack.services.errors import PermissionDeniedError

log = get_logger("routers.point_suggestions")
router = APIRouter(prefix="/point-suggestions", tags=["points"])


async def _own_suggestion(db: AsyncSession, user: User, suggestion_id: str) -> PointRuleSuggestion:
    suggestion = await get_or_404(db, PointRuleSuggestion, suggestion_id, "Suggestion")
    if not is_admin(user) and suggestion.teacher_id != acting_teacher_id(user):
        raise PermissionDeniedError("This suggestion belongs to another teacher.")
    return suggestion


@router.post("/generate", response_model=GenerateSuggestionsOut)
async def generate(
    payload: GenerateSuggestionsIn,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    """Run the active point rules for one student or a whole class."""
    teacher_id = acting_teacher_id(user)
    if payload.class_id:
        if not is_admin(user):
            cls = await get_or_404(db, SchoolClass, payload.class_id, "Class")
            if user.teacher_id not in (cls.teacher_ids or []):
                raise PermissionDeniedError("Only teachers of this class can generate its suggestions.")
        pending, applied = await suggestion_service.generate_for_class(db, payload.class_id, teacher_id=teacher_id)
    else:
        pending, applied = await suggestion_service.generate_for_student(
            db, payload.student_id, teacher_id=teacher_id
        )
    log.info("generated %d suggestions (%d auto-applied) for %s", len(pending), len(applied), teacher_id)
    return GenerateSuggestionsOut(
        created=[SuggestionOut.model_validate(s) for s in pending],
        auto_applied=[SuggestionOut.model_validate(s) for s in applied],
    )


@router.get("", response_model=list[SuggestionOut])
async def list_suggestions(
    student_id: Optional[str] = None,
    include_applied: bool = False,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    return await suggestion_service.list_suggestions(
        db,
        teacher_id=None if is_admin(user) else acting_teacher_id(user),
        student_id=student_id,
        include_applied=include_applied,
    )


@router.post("/{suggestion_id}/apply", response_model=SuggestionOut)
async def apply(
    suggestion_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    await _own_suggestion(db, user, suggestion_id)
    return await suggestion_service.apply_suggestion(db, suggestion_id)


@router.delete("/{suggestion_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def dismiss(
    suggestion_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    await _own_suggestion(db, user, suggestion_id)
    await suggestion_service.dismiss_suggestion(db, suggestion_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
