# src/edutrack/api/routers/leaderboard.py
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_auth
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.reports import LeaderboardEntry
from edutrack.services import reports

router = APIRouter(prefix="/leaderboard", tags=["reports"])


@router.get("", response_model=list[LeaderboardEntry])
async def leaderboard(
    sort_by: Literal["points", "name", "grade"] = "points",
    order: Optional[Literal["asc", "desc"]] = Query(None, description="Defaults to desc for points, asc otherwise"),
    grade: Optional[int] = Query(None, ge=1, le=12),
    class_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_auth),
):
    return await reports.leaderboard(
        db,
        sort_by=sort_by,
        descending=None if order is None else order == "desc",
        grade=grade,
        class_id=class_id,
        limit=limit,
    )
