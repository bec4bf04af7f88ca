# src/edutrack/api/routers/teachers.py
from edutrack.api.router_factory import build_crud_router
from edutrack.auth.deps import require_admin
from edutrack.db.models import Teacher
from edutrack.schemas.teachers import TeacherCreate, TeacherOut, TeacherUpdate
from edutrack.services import teachers as teacher_service


async def _create(db, data: dict):
    return await teacher_service.create_teacher(db, **data)


router = build_crud_router(
    model=Teacher,
    read_schema=TeacherOut,
    create_schema=TeacherCreate,
    update_schema=TeacherUpdate,
    path_prefix="/teachers",
    entity="Teacher",
    tags=["teachers"],
    read_dependency=require_admin,
    on_create=_create,
    on_update=teacher_service.update_teacher,
    on_delete=teacher_service.delete_teacher,
)
