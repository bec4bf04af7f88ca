# src/edutrack/api/routers/point_rules.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.deps import require_admin, require_staff
from edutrack.db.models import PointRule, User
from edutrack.db.session import get_session
from edutrack.schemas.points import PointRuleCreate, PointRuleOut, PointRuleUpdate
from edutrack.services import point_suggestions as rule_service
from edutrack.services.common import get_or_404

router = APIRouter(prefix="/point-rules", tags=["points"])


@router.get("", response_model=list[PointRuleOut])
async def list_rules(
    active_only: bool = False,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_staff),
):
    return await rule_service.list_rules(db, active_only=active_only)


@router.post("", response_model=PointRuleOut, status_code=status.HTTP_201_CREATED)
async def create_rule(
    payload: PointRuleCreate,
    db: AsyncSession = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return await rule_service.create_rule(db, payload.model_dump(), created_by=admin.id)


@router.get("/{rule_id}", response_model=PointRuleOut)
async def get_rule(
    rule_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_staff),
):
    return await get_or_404(db, PointRule, rule_id, "Point rule")


@router.api_route("/{rule_id}", methods=["PUT", "PATCH"], response_model=PointRuleOut)
async def update_rule(
    rule_id: str,
    payload: PointRuleUpdate,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    return await rule_service.update_rule(db, rule_id, payload.changes())


@router.post("/{rule_id}/toggle", response_model=PointRuleOut)
async def toggle_rule(
    rule_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    rule = await get_or_404(db, PointRule, rule_id, "Point rule")
    return await rule_service.set_rule_active(db, rule_id, not rule.is_active)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_rule(
    rule_id: str,
    db: AsyncSession = Depends(get_session),
    _user: User = Depends(require_admin),
):
    await rule_service.delete_rule(db, rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
