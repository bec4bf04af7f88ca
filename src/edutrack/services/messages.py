from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import Message, User

from .common import get_or_404
from .errors import PermissionDeniedError, ValidationError

log = logging.getLogger(__name__)


async def send_message(db: AsyncSession, sender: User, *, recipient_id: str, subject: str,
                       body: str) -> Message:
    if recipient_id == sender.id:
        raise ValidationError("You cannot send a message to yourself.")
    await get_or_404(db, User, recipient_id, "Recipient")
    msg = Message(
        sender_id=sender.id,
        sender_username=sender.username,
        recipient_id=recipient_id,
        subject=subject.strip(),
        body=body,
        is_read=False,
    )
    db.add(msg)
    await db.commit()
    await db.refresh(msg)
    log.info("message %s sent %s -> %s", msg.id, sender.id, recipient_id)
    return msg


async def inbox(db: AsyncSession, user: User, *, unread_only: bool = False,
                limit: int = 30, offset: int = 0) -> list[Message]:
    stmt = sa.select(Message).where(Message.recipient_id == user.id)
    if unread_only:
        stmt = stmt.where(Message.is_read.is_(False))
    stmt = stmt.order_by(Message.date_sent.desc(), Message.id).limit(limit).offset(offset)
    return list((await db.scalars(stmt)).all())


async def sent(db: AsyncSession, user: User, *, limit: int = 30, offset: int = 0) -> list[Message]:
    stmt = (
        sa.select(Message)
        .where(Message.sender_id == user.id)
        .order_by(Message.date_sent.desc(), Message.id)
        .limit(limit)
        .offset(offset)
    )
    return list((await db.scalars(stmt)).all())


async def get_message(db: AsyncSession, user: User, message_id: str) -> Message:
    msg = await get_or_404(db, Message, message_id, "Message")
    if user.id not in (msg.sender_id, msg.recipient_id):
        raise PermissionDeniedError("This message is not addressed to you.")
    return msg


async def mark_read(db: AsyncSession, user: User, message_id: str) -> Message:
    msg = await get_or_404(db, Message, message_id, "Message")
    if msg.recipient_id != user.id:
        raise PermissionDeniedError("Only the recipient can mark a message as read.")
    if not msg.is_read:
        msg.is_read = True
        await db.commit()
        await db.refresh(msg)
    return msg


async def unread_count(db: AsyncSession, user: User) -> int:
    return int(
        await db.scalar(
            sa.select(sa.func.count(Message.id)).where(
                Message.recipient_id == user.id, Message.is_read.is_(False)
            )
        )
        or 0
    )
