from __future__ import annotations

import datetime as dt
from typing import Any, ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import JSONB, Base, StrIdMixin


class SchoolEvent(StrIdMixin, Base):
    __tablename__ = "events"

    NOTE: ClassVar[str] = (
        "description=School calendar entries, including generated Liberian holidays and cultural events."
    )

    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    # "all" or a list of role names
    audience: Mapped[Any] = mapped_column(JSONB(), nullable=False, default="all")
