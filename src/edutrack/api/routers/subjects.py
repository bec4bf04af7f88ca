# src/edutrack/api/routers/subjects.py
from edutrack.api.router_factory import build_crud_router
from edutrack.db.models import Subject
from edutrack.schemas.subjects import SubjectCreate, SubjectOut, SubjectUpdate
from edutrack.services import subjects as subject_service


async def _create(db, data: dict):
    return await subject_service.create_subject(
        db, name=data["name"], description=data.get("description"), subject_id=data.get("id")
    )


router = build_crud_router(
    model=Subject,
    read_schema=SubjectOut,
    create_schema=SubjectCreate,
    update_schema=SubjectUpdate,
    path_prefix="/subjects",
    entity="Subject",
    tags=["subjects"],
    on_create=_create,
    on_update=subject_service.update_subject,
    on_delete=subject_service.delete_subject,
)
