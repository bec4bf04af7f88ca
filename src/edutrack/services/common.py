# src/edutrack/services/common.py
from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.base import prefixed_code

from .errors import ConflictError, NotFoundError

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

# ST/TC codes have 10k values; give up long before that gets crowded
MAX_CODE_ATTEMPTS = 50


async def get_or_404(db: AsyncSession, model: Type[ModelT], obj_id: Any, entity: Optional[str] = None) -> ModelT:
    obj = await db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(entity or model.__name__, obj_id)
    return obj


async def unique_code(db: AsyncSession, model: type, prefix: str) -> str:
    """Pick an unused ``<prefix>NNNN`` primary key for ``model``."""
    for _ in range(MAX_CODE_ATTEMPTS):
        candidate = prefixed_code(prefix)
        if await db.get(model, candidate) is None:
            return candidate
    log.warning("exhausted %d attempts picking a %s id", MAX_CODE_ATTEMPTS, prefix)
    raise ConflictError(f"Could not allocate a unique {prefix} id", context={"prefix": prefix})


def without(ids: Optional[list[str]], value: str) -> list[str]:
    """New list minus ``value`` (JSON columns need a fresh list to register the change)."""
    return [i for i in (ids or []) if i != value]


def dedupe(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


async def missing_ids(db: AsyncSession, model: type, ids: list[str]) -> list[str]:
    if not ids:
        return []
    found = set((await db.scalars(sa.select(model.id).where(model.id.in_(ids)))).all())
    return [i for i in ids if i not in found]
