from __future__ import annotations

from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import JSONB, Base, StrIdMixin, TimestampMixin


class Teacher(StrIdMixin, TimestampMixin, Base):
    __tablename__ = "teachers"

    NOTE: ClassVar[str] = "description=Teaching staff and the subjects they are qualified to teach."

    __table_args__ = {"comment": "Teachers; ids look like TC1180."}

    user_id: Mapped[Optional[str]] = mapped_column(sa.String(64), index=True)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    subject_ids: Mapped[list[str]] = mapped_column(JSONB(), nullable=False, default=list)
