"""Create tables for all ORM models

Revision ID: 0001_create_tables
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

import logging

from alembic import op

log = logging.getLogger(__name__)

# ---- Alembic identifiers ----
revision = "0001_create_tables"
down_revision = None
branch_labels = None
depends_on = None


def _import_models() -> None:
    # Registers every mapper on Base.metadata
    import edutrack.db.models  # noqa: F401


def upgrade() -> None:
    _import_models()
    from edutrack.db.base import Base

    bind = op.get_bind()
    log.info("creating %d tables", len(Base.metadata.tables))
    Base.metadata.create_all(bind=bind)


def downgrade() -> None:
    _import_models()
    from edutrack.db.base import Base

    Base.metadata.drop_all(bind=op.get_bind())
