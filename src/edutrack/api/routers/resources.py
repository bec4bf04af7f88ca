# src/edutrack/api/routers/resources.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.app_logger import get_logger
from edutrack.auth.deps import is_staff, require_auth, require_staff
from edutrack.core.config import settings
from edutrack.db.models import DocumentResource, ResourceCategory, User
from edutrack.db.session import get_session
from edutrack.schemas.resources import ResourceOut
from edutrack.services import classes as class_service
from edutrack.services import resources as resource_service
from edutrack.services.common import get_or_404
from edutrack.services.errors import NotFoundError, PermissionDeniedError

log = get_logger("routers.resources")
router = APIRouter(prefix="/resources", tags=["resources"])


async def _visible_resource(db: AsyncSession, user: User, resource_id: str) -> DocumentResource:
    resource = await get_or_404(db, DocumentResource, resource_id, "Resource")
    if not is_staff(user):
        member_of = {c.id for c in await class_service.classes_for_user(db, user)}
        if resource.class_id not in member_of:
            raise PermissionDeniedError("This resource belongs to a class you are not in.")
    return resource


@router.post("", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
async def upload_resource(
    class_id: str = Form(...),
    title: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    category: ResourceCategory = Form(ResourceCategory.OTHER),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    # read one byte past the limit so oversize uploads are detected without buffering them whole
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    return await resource_service.save_resource(
        db,
        user,
        class_id=class_id,
        title=title,
        description=description,
        category=category,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )


@router.get("", response_model=list[ResourceOut])
async def list_resources(
    class_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    limit: int = Query(settings.PAGE_SIZE_RESOURCES, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    class_ids = None
    if not is_staff(user):
        class_ids = [c.id for c in await class_service.classes_for_user(db, user)]
        if class_id is not None and class_id not in class_ids:
            raise PermissionDeniedError("You are not a member of this class.")
    return await resource_service.list_resources(
        db, class_id=class_id, teacher_id=teacher_id, class_ids=class_ids, limit=limit, offset=offset
    )


@router.get("/{resource_id}", response_model=ResourceOut)
async def get_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    return await _visible_resource(db, user, resource_id)


@router.get("/{resource_id}/download")
async def download_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_auth),
):
    resource = await _visible_resource(db, user, resource_id)
    path = Path(resource.storage_path)
    if not path.is_file():
        log.warning("stored file missing for resource %s: %s", resource_id, path)
        raise NotFoundError("Resource file", resource_id)
    return FileResponse(path, media_type=resource.file_type, filename=resource.file_name)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_session),
    user: User = Depends(require_staff),
):
    await resource_service.delete_resource(db, user, resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
