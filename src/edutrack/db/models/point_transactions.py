from __future__ import annotations

import datetime as dt
from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin


class PointTransaction(StrIdMixin, Base):
    __tablename__ = "point_transactions"

    NOTE: ClassVar[str] = "description=Ledger of reward points awarded to students."

    student_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    teacher_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    points: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False)
