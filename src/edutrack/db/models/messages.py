from __future__ import annotations

from datetime import datetime
from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from edutrack.db.base import Base, StrIdMixin


class Message(StrIdMixin, Base):
    __tablename__ = "messages"

    NOTE: ClassVar[str] = "description=Direct messages between users."

    sender_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    sender_username: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    recipient_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    body: Mapped[str] = mapped_column(sa.Text, nullable=False)
    date_sent: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )
    is_read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
