from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin, TimestampMixin


class Grade(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "grades"

    NOTE: ClassVar[str] = (
        "description=Assignment and term results. Score is free text (\"87\", \"B+\", \"18/20\"); "
        "term results carry continuous assessment and external examination components."
    )

    __table_args__ = (
        sa.Index("ix_grades_student_class", "student_id", "class_id"),
        {"comment": "Grades per student and class, including WAEC term components."},
    )

    student_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    class_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    subject_or_assignment_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    score: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="")
    max_score: Mapped[Optional[str]] = mapped_column(sa.String(32))
    date_assigned: Mapped[date] = mapped_column(sa.Date, nullable=False)
    due_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    submission_date: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    status: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="Graded")
    teacher_comments: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Liberian term results
    term: Mapped[Optional[int]] = mapped_column(sa.Integer)
    continuous_assessment: Mapped[Optional[float]] = mapped_column(sa.Float)
    external_examination: Mapped[Optional[float]] = mapped_column(sa.Float)
    liberian_grade: Mapped[Optional[str]] = mapped_column(sa.String(4))
    submitted_to_admin: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
