"""
Persistence side of the point rule engine: rule CRUD, generating
suggestions for a student or class, and applying or dismissing them.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import (
    Grade,
    PointRule,
    PointRuleSuggestion,
    PointRuleTrigger,
    PointTransaction,
    SchoolClass,
    Student,
)

from .common import get_or_404
from .errors import ConflictError
from .point_rules import PointRuleEngine
from .students import award_points

log = logging.getLogger(__name__)


def _clean_parameters(parameters) -> dict:
    if parameters is None:
        return {}
    if hasattr(parameters, "model_dump"):
        parameters = parameters.model_dump()
    return {k: v for k, v in dict(parameters).items() if v is not None}


def _enum_value(v):
    return getattr(v, "value", v)


# ---------------------------------------------------------------- rules

async def list_rules(db: AsyncSession, *, active_only: bool = False) -> list[PointRule]:
    stmt = sa.select(PointRule).order_by(PointRule.name)
    if active_only:
        stmt = stmt.where(PointRule.is_active.is_(True))
    return list((await db.scalars(stmt)).all())


async def create_rule(db: AsyncSession, data: dict, *, created_by: str) -> PointRule:
    rule = PointRule(
        name=data["name"],
        description=data.get("description", ""),
        condition=_enum_value(data["condition"]),
        points=data["points"],
        trigger=_enum_value(data.get("trigger") or PointRuleTrigger.TEACHER_SUGGESTION),
        is_active=data.get("is_active", True),
        parameters=_clean_parameters(data.get("parameters")),
        created_by=created_by,
    )
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    log.info("created point rule %s (%s)", rule.id, rule.condition)
    return rule


async def update_rule(db: AsyncSession, rule_id: str, changes: dict) -> PointRule:
    rule = await get_or_404(db, PointRule, rule_id, "Point rule")
    for key, value in changes.items():
        if key == "parameters":
            value = _clean_parameters(value)
        elif key in ("condition", "trigger"):
            value = _enum_value(value)
        setattr(rule, key, value)
    await db.commit()
    await db.refresh(rule)
    return rule


async def set_rule_active(db: AsyncSession, rule_id: str, active: bool) -> PointRule:
    return await update_rule(db, rule_id, {"is_active": active})


async def delete_rule(db: AsyncSession, rule_id: str) -> None:
    rule = await get_or_404(db, PointRule, rule_id, "Point rule")
    await db.execute(sa.delete(PointRuleSuggestion).where(PointRuleSuggestion.rule_id == rule_id))
    await db.delete(rule)
    await db.commit()
    log.info("deleted point rule %s and its suggestions", rule_id)


# ---------------------------------------------------------------- suggestions

async def list_suggestions(
    db: AsyncSession,
    *,
    teacher_id: Optional[str] = None,
    student_id: Optional[str] = None,
    include_applied: bool = False,
) -> list[PointRuleSuggestion]:
    stmt = sa.select(PointRuleSuggestion)
    if teacher_id:
        stmt = stmt.where(PointRuleSuggestion.teacher_id == teacher_id)
    if student_id:
        stmt = stmt.where(PointRuleSuggestion.student_id == student_id)
    if not include_applied:
        stmt = stmt.where(PointRuleSuggestion.is_applied.is_(False))
    stmt = stmt.order_by(PointRuleSuggestion.created_at.desc(), PointRuleSuggestion.id)
    return list((await db.scalars(stmt)).all())


async def _apply(db: AsyncSession, suggestion: PointRuleSuggestion, *, now: datetime) -> None:
    await award_points(
        db,
        suggestion.student_id,
        points=suggestion.suggested_points,
        reason=suggestion.reason,
        teacher_id=suggestion.teacher_id,
        on=now.date(),
        commit=False,
    )
    suggestion.is_applied = True
    suggestion.applied_at = now


async def generate_for_students(
    db: AsyncSession,
    student_ids: list[str],
    *,
    teacher_id: str,
    now: Optional[datetime] = None,
) -> tuple[list[PointRuleSuggestion], list[PointRuleSuggestion]]:
    """
    Evaluate active rules for the given students and store the results.

    Returns ``(pending, auto_applied)``. A rule is not suggested again for a
    student while an earlier suggestion is pending, or was applied inside the
    rule's evaluation window. ``automatic`` rules are applied straight away.
    """
    now = now or datetime.now(timezone.utc)
    rules = await list_rules(db, active_only=True)
    if not rules or not student_ids:
        return [], []

    students = (await db.scalars(sa.select(Student).where(Student.id.in_(student_ids)))).all()
    grades = (await db.scalars(sa.select(Grade).where(Grade.student_id.in_(student_ids)))).all()
    txs = (
        await db.scalars(sa.select(PointTransaction).where(PointTransaction.student_id.in_(student_ids)))
    ).all()
    classes = (await db.scalars(sa.select(SchoolClass))).all()
    engine = PointRuleEngine(rules, now=now)
    rules_by_id = {r.id: r for r in engine.rules}
    existing = (
        await db.scalars(
            sa.select(PointRuleSuggestion).where(PointRuleSuggestion.student_id.in_(student_ids))
        )
    ).all()
    # pending, or applied for evidence that is still inside the rule's window
    blocked = {
        (s.rule_id, s.student_id)
        for s in existing
        if s.rule_id in rules_by_id
        and (not s.is_applied or engine.within_window(rules_by_id[s.rule_id], s.applied_at))
    }

    pending: list[PointRuleSuggestion] = []
    applied: list[PointRuleSuggestion] = []
    for student in students:
        awards = engine.generate_suggestions(
            student,
            grades=[g for g in grades if g.student_id == student.id],
            point_transactions=[t for t in txs if t.student_id == student.id],
            classes=classes,
            teacher_id=teacher_id,
        )
        for award in awards:
            if (award.rule_id, award.student_id) in blocked:
                continue
            suggestion = PointRuleSuggestion(
                rule_id=award.rule_id,
                student_id=award.student_id,
                teacher_id=award.teacher_id,
                reason=award.reason,
                suggested_points=award.suggested_points,
                is_applied=False,
                created_at=now,
            )
            db.add(suggestion)
            if award.trigger == PointRuleTrigger.AUTOMATIC.value:
                await _apply(db, suggestion, now=now)
                applied.append(suggestion)
            else:
                pending.append(suggestion)

    await db.commit()
    for s in pending + applied:
        await db.refresh(s)
    log.info(
        "point suggestions for %d students: %d pending, %d auto-applied",
        len(students), len(pending), len(applied),
    )
    return pending, applied


async def generate_for_student(db: AsyncSession, student_id: str, *, teacher_id: str,
                               now: Optional[datetime] = None):
    await get_or_404(db, Student, student_id, "Student")
    return await generate_for_students(db, [student_id], teacher_id=teacher_id, now=now)


async def generate_for_class(db: AsyncSession, class_id: str, *, teacher_id: str,
                             now: Optional[datetime] = None):
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    return await generate_for_students(db, list(cls.student_ids or []), teacher_id=teacher_id, now=now)


async def apply_suggestion(db: AsyncSession, suggestion_id: str,
                           now: Optional[datetime] = None) -> PointRuleSuggestion:
    suggestion = await get_or_404(db, PointRuleSuggestion, suggestion_id, "Suggestion")
    if suggestion.is_applied:
        raise ConflictError("Suggestion has already been applied.", context={"id": suggestion_id})
    await _apply(db, suggestion, now=now or datetime.now(timezone.utc))
    await db.commit()
    await db.refresh(suggestion)
    log.info("applied suggestion %s (+%d to %s)", suggestion.id, suggestion.suggested_points,
             suggestion.student_id)
    return suggestion


async def dismiss_suggestion(db: AsyncSession, suggestion_id: str) -> None:
    suggestion = await get_or_404(db, PointRuleSuggestion, suggestion_id, "Suggestion")
    if suggestion.is_applied:
        raise ConflictError("Applied suggestions cannot be dismissed.", context={"id": suggestion_id})
    await db.delete(suggestion)
    await db.commit()
