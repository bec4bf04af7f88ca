from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin


class DocumentResource(StrIdMixin, Base):
    __tablename__ = "resources"

    NOTE: ClassVar[str] = "description=Files teachers share with a class (notes, briefs, readings)."

    class_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    teacher_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    file_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(sa.String(128), nullable=False)
    file_url: Mapped[str] = mapped_column(sa.String(512), nullable=False)
    storage_path: Mapped[str] = mapped_column(sa.String(1024), nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )
    category: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="Other Resource")
