from __future__ import annotations

from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import JSONB, Base, StrIdMixin, TimestampMixin


class SchoolClass(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "classes"

    NOTE: ClassVar[str] = (
        "description=A cohort of students taught by one or more teachers across one or more subjects."
    )

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    teacher_ids: Mapped[list[str]] = mapped_column(JSONB(), nullable=False, default=list)
    student_ids: Mapped[list[str]] = mapped_column(JSONB(), nullable=False, default=list)
    subject_ids: Mapped[list[str]] = mapped_column(JSONB(), nullable=False, default=list)
