# src/edutrack/api/routers/reports.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_admin, require_auth
from edutrack.db.models import User
from edutrack.db.session import get_session
from edutrack.schemas.reports import DashboardOut, MoEReportOut
from edutrack.services import reports

router = APIRouter(tags=["reports"])


@router.get("/reports/moe", response_model=MoEReportOut)
async def moe_report(
    term: Optional[int] = Query(None, ge=1, le=3),
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    """Ministry of Education summary: enrollment, results, staffing and compliance."""
    return await reports.moe_report(db, term=term)


@router.get("/dashboard", response_model=DashboardOut)
async def dashboard(db: AsyncSession = Depends(get_session), user: User = Depends(require_auth)):
    return DashboardOut.model_validate(await reports.dashboard_for(db, user), from_attributes=True)
