from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import JSONB, Base, StrIdMixin, TimestampMixin


class PointRule(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "point_rules"

    NOTE: ClassVar[str] = (
        "description=Configurable conditions under which students earn reward points; "
        "evaluated by the suggestion engine."
    )

    __table_args__ = (
        sa.CheckConstraint("points >= 1 AND points <= 100", name="points_range"),
    )

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    condition: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    points: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    trigger: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="teacher_suggestion")
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    # min_score, days_early, improvement_threshold, subject_id, grade_level
    parameters: Mapped[dict[str, Any]] = mapped_column(JSONB(), nullable=False, default=dict)
    created_by: Mapped[str] = mapped_column(sa.String(64), nullable=False)


class PointRuleSuggestion(StrIdMixin, Base):
    __tablename__ = "point_rule_suggestions"

    NOTE: ClassVar[str] = "description=Suggested, not yet applied, point awards produced by point rules."

    rule_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    teacher_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    suggested_points: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    is_applied: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )
    applied_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
