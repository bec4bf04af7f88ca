from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import APIModel


class MessageCreate(APIModel):
    recipient_id: str
    subject: str = Field(min_length=1, max_length=255)
    body: str = Field(min_length=1)


class MessageOut(APIModel):
    id: str
    sender_id: str
    sender_username: str
    recipient_id: str
    subject: str
    body: str
    date_sent: datetime
    is_read: bool


class UnreadCountOut(APIModel):
    unread: int
