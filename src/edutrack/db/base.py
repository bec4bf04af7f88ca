# src/edutrack/db/base.py
from __future__ import annotations

import random
import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import MetaData
from sqlalchemy.dialects import postgresql as pg
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON, TypeDecorator


# -----------------------------------------------------------------------------
# Declarative Base with naming conventions (great for Alembic autogenerate)
# -----------------------------------------------------------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base for all models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# -----------------------------------------------------------------------------
# JSONB that becomes JSONB on Postgres and JSON elsewhere
# -----------------------------------------------------------------------------
class JSONB(TypeDecorator):
    """
    Platform-aware JSON type.

    - On PostgreSQL ⇒ JSONB
    - Elsewhere     ⇒ JSON
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(pg.JSONB())
        return dialect.type_descriptor(JSON())


def new_id() -> str:
    return uuid.uuid4().hex


def prefixed_code(prefix: str, digits: int = 4) -> str:
    """Short human-facing ids such as ``ST0427`` (students) or ``TC1180`` (teachers)."""
    return f"{prefix}{random.randint(0, 10 ** digits - 1):0{digits}d}"


# -----------------------------------------------------------------------------
# Common mixins: string PK + timestamps
# -----------------------------------------------------------------------------
class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
        nullable=False,
    )


class StrIdMixin:
    """
    Mixin that adds a string primary key.

    Records keep the document-style ids they were created with, so callers
    may pass their own (``subj_math``) or let the default generate a hex uuid.
    """
    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=new_id)


__all__ = ["Base", "JSONB", "StrIdMixin", "TimestampMixin", "new_id", "prefixed_code"]
