"""
Document resources: files teachers share with a class. Bytes live under
``settings.UPLOAD_DIR/resources/<class_id>/``; the table keeps metadata.
"""
from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.core.config import settings
from edutrack.db.models import DocumentResource, ResourceCategory, SchoolClass, User, UserRole

from .common import get_or_404
from .errors import PermissionDeniedError, ValidationError

log = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR) / "resources"


def safe_filename(name: Optional[str]) -> str:
    base = Path(name or "upload").name
    cleaned = _UNSAFE.sub("_", base).strip("._")
    return cleaned[:200] or "upload"


def remove_stored_file(storage_path: str, resource_id: Optional[str] = None) -> None:
    """Unlink a stored upload; call only once the row's delete has been committed."""
    path = Path(storage_path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.warning("could not remove %s for resource %s: %s", path, resource_id, e)


def _owner_id(user: User) -> str:
    return user.teacher_id or user.id


async def save_resource(
    db: AsyncSession,
    user: User,
    *,
    class_id: str,
    title: str,
    description: Optional[str],
    category: ResourceCategory | str,
    filename: Optional[str],
    content_type: Optional[str],
    content: bytes,
) -> DocumentResource:
    cls = await get_or_404(db, SchoolClass, class_id, "Class")
    if user.role != UserRole.ADMIN.value and user.teacher_id not in (cls.teacher_ids or []):
        raise PermissionDeniedError("Only teachers of this class can share resources with it.")
    if not content:
        raise ValidationError("Uploaded file is empty.")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            "Uploaded file is too large.",
            context={"max_bytes": settings.MAX_UPLOAD_BYTES, "size": len(content)},
        )

    resource_id = uuid.uuid4().hex
    file_name = safe_filename(filename)
    class_dir = upload_root() / safe_filename(class_id)
    class_dir.mkdir(parents=True, exist_ok=True)
    dest = class_dir / f"{resource_id}_{file_name}"
    dest.write_bytes(content)

    resource = DocumentResource(
        id=resource_id,
        class_id=class_id,
        teacher_id=_owner_id(user),
        title=title.strip(),
        description=description,
        file_name=file_name,
        file_type=content_type or "application/octet-stream",
        file_url=f"/resources/{resource_id}/download",
        storage_path=str(dest),
        category=ResourceCategory(category).value,
    )
    db.add(resource)
    try:
        await db.commit()
    except Exception:
        dest.unlink(missing_ok=True)
        raise
    await db.refresh(resource)
    log.info("saved resource %s (%s, %d bytes) for class %s", resource_id, file_name, len(content), class_id)
    return resource


async def list_resources(db: AsyncSession, *, class_id: Optional[str] = None,
                         teacher_id: Optional[str] = None,
                         class_ids: Optional[list[str]] = None,
                         limit: int = 25, offset: int = 0) -> list[DocumentResource]:
    stmt = sa.select(DocumentResource)
    if class_id:
        stmt = stmt.where(DocumentResource.class_id == class_id)
    if teacher_id:
        stmt = stmt.where(DocumentResource.teacher_id == teacher_id)
    if class_ids is not None:
        stmt = stmt.where(DocumentResource.class_id.in_(class_ids))
    stmt = stmt.order_by(DocumentResource.upload_date.desc(), DocumentResource.id).limit(limit).offset(offset)
    return list((await db.scalars(stmt)).all())


async def delete_resource(db: AsyncSession, user: User, resource_id: str) -> None:
    resource = await get_or_404(db, DocumentResource, resource_id, "Resource")
    if user.role != UserRole.ADMIN.value and resource.teacher_id != _owner_id(user):
        raise PermissionDeniedError("Only the uploading teacher or an administrator can delete this resource.")
    storage_path = resource.storage_path
    await db.delete(resource)
    await db.commit()
    remove_stored_file(storage_path, resource_id)
    log.info("deleted resource %s", resource_id)
