from __future__ import annotations

from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin


class Subject(StrIdMixin, Base):
    __tablename__ = "subjects"

    NOTE: ClassVar[str] = "description=Curriculum subjects such as Mathematics or Liberian History."

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
