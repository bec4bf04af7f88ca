from __future__ import annotations

from typing import Any, ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import JSONB, Base, StrIdMixin, TimestampMixin


class Student(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "students"

    NOTE: ClassVar[str] = (
        "description=Enrolled students with their grade level, reward point total "
        "and attendance history; ids look like ST0427."
    )

    __table_args__ = (
        sa.CheckConstraint("grade >= 1 AND grade <= 12", name="grade_range"),
        {"comment": "Students with grade level, points and attendance records."},
    )

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    grade: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    points: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0, server_default="0")
    parent_id: Mapped[Optional[str]] = mapped_column(sa.String(64), index=True)
    # list of {"date": "YYYY-MM-DD", "status": "present|absent|late"}
    attendance: Mapped[list[dict[str, Any]]] = mapped_column(JSONB(), nullable=False, default=list)
