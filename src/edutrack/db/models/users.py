from __future__ import annotations

from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin, TimestampMixin


class User(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    NOTE: ClassVar[str] = (
        "description=Login accounts. Role is one of ADMIN, TEACHER, STUDENT, PARENT; "
        "students and parents point at a student record, teachers at a teacher record."
    )

    __table_args__ = {"comment": "Login accounts with role and linked student/teacher ids."}

    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    hashed_password: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    role: Mapped[str] = mapped_column(sa.String(16), nullable=False, index=True)
    student_id: Mapped[Optional[str]] = mapped_column(sa.String(64), index=True)
    teacher_id: Mapped[Optional[str]] = mapped_column(sa.String(64), index=True)
