import textwrap
import sqlalchemy as sa
from fastapi import APIRouter, Depends, status, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from typing import Any, Awaitable, Callable, Optional, Sequence, Type, TypeVar

from edutrack.auth.deps import require_admin, require_auth
from edutrack.core.config import settings
from edutrack.db.session import get_session
from edutrack.services.common import get_or_404

ModelT = TypeVar("ModelT")
SchemaT = TypeVar("SchemaT", bound=BaseModel)

CreateFn = Callable[[AsyncSession, dict], Awaitable[Any]]
UpdateFn = Callable[[AsyncSession, str, dict], Awaitable[Any]]
DeleteFn = Callable[[AsyncSession, str], Awaitable[None]]


def _get_attr(model: type, name: str) -> InstrumentedAttribute:
    try:
        return getattr(model, name)
    except AttributeError as e:
        raise RuntimeError(f"{model.__name__} has no attribute '{name}'") from e


def _get_model_note(model: type) -> str:
    note = getattr(model, "NOTE", "") or ""
    return " ".join(note.strip().split())


def _note_summary(note: str, label: str) -> str:
    if not note:
        return label
    idx = note.lower().find("description=")
    if idx != -1:
        note = note[idx + len("description="):]
    for sep in (";", "."):
        if sep in note:
            note = note.split(sep, 1)[0]
            break
    return note.strip() or label


def _with_model_note(note: str, extra: str) -> str:
    if note:
        return textwrap.dedent(f"""{note}\n\n{extra}""").strip()
    return extra


def build_crud_router(
    *,
    model: Type[ModelT],
    read_schema: Type[SchemaT],
    create_schema: Type[SchemaT],
    update_schema: Type[SchemaT],
    path_prefix: str,
    entity: str,
    tags: Optional[Sequence[str]] = None,
    page_size_key: Optional[str] = None,
    order_by: Optional[str] = "name",
    read_dependency: Callable[..., Any] = require_auth,
    write_dependency: Callable[..., Any] = require_admin,
    on_create: Optional[CreateFn] = None,
    on_update: Optional[UpdateFn] = None,
    on_delete: Optional[DeleteFn] = None,
) -> APIRouter:
    """
    Standard list/get/create/update/delete routes for one model.

    Writes go through the ``on_*`` service callbacks when given so that
    id allocation, membership checks and cascades stay in the service
    layer; otherwise the row is written directly.
    """
    router = APIRouter(prefix=path_prefix, tags=list(tags or []))

    pk_col = _get_attr(model, "id")
    sort_col = _get_attr(model, order_by) if order_by else pk_col

    table_name = getattr(model, "__tablename__", model.__name__.lower())
    model_note = _get_model_note(model)
    summary = _note_summary(model_note, entity)
    default_limit = settings.page_size(page_size_key or table_name)

    # LIST
    async def list_items(
        session: AsyncSession = Depends(get_session),
        limit: int = default_limit,
        offset: int = 0,
        _user=Depends(read_dependency),
    ) -> list[read_schema]:
        stmt = sa.select(model).order_by(sort_col, pk_col).limit(limit).offset(offset)
        items = (await session.scalars(stmt)).all()
        return [read_schema.model_validate(it) for it in items]

    router.add_api_route(
        "",
        list_items,
        methods=["GET"],
        response_model=list[read_schema],
        summary=f"List {entity}s",
        description=_with_model_note(
            model_note,
            f"Retrieve a page of `{table_name}` records. "
            f"Use `limit` (default {default_limit}) and `offset` for pagination.",
        ),
    )

    # GET ONE
    async def get_item(
        item_id: str,
        session: AsyncSession = Depends(get_session),
        _user=Depends(read_dependency),
    ) -> read_schema:
        obj = await get_or_404(session, model, item_id, entity)
        return read_schema.model_validate(obj)

    router.add_api_route(
        "/{item_id}",
        get_item,
        methods=["GET"],
        response_model=read_schema,
        summary=f"Get {entity}",
        description=_with_model_note(
            model_note,
            f"Retrieve a single `{table_name}` record. Returns HTTP 404 if it does not exist.",
        ),
    )

    # CREATE
    async def create_item(
        payload: create_schema,
        session: AsyncSession = Depends(get_session),
        _user=Depends(write_dependency),
    ) -> read_schema:
        data = payload.model_dump(exclude_unset=True)
        if on_create is not None:
            obj = await on_create(session, data)
        else:
            obj = model(**data)
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return read_schema.model_validate(obj)

    router.add_api_route(
        "",
        create_item,
        methods=["POST"],
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {entity}",
        description=_with_model_note(model_note, summary),
    )

    # UPDATE
    async def update_item(
        item_id: str,
        payload: update_schema,
        session: AsyncSession = Depends(get_session),
        _user=Depends(write_dependency),
    ) -> read_schema:
        data = payload.model_dump(exclude_unset=True)
        if on_update is not None:
            obj = await on_update(session, item_id, data)
        else:
            obj = await get_or_404(session, model, item_id, entity)
            for k, v in data.items():
                setattr(obj, k, v)
            await session.commit()
            await session.refresh(obj)
        return read_schema.model_validate(obj)

    router.add_api_route(
        "/{item_id}",
        update_item,
        methods=["PUT", "PATCH"],
        response_model=read_schema,
        summary=f"Update {entity}",
        description=_with_model_note(
            model_note,
            f"Update fields of a `{table_name}` record. Only fields present in the body change.",
        ),
    )

    # DELETE
    async def delete_item(
        item_id: str,
        session: AsyncSession = Depends(get_session),
        _user=Depends(write_dependency),
    ) -> Response:
        if on_delete is not None:
            await on_delete(session, item_id)
        else:
            obj = await get_or_404(session, model, item_id, entity)
            await session.delete(obj)
            await session.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    router.add_api_route(
        "/{item_id}",
        delete_item,
        methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        summary=f"Delete {entity}",
        description=_with_model_note(
            model_note,
            f"Delete a `{table_name}` record. Returns HTTP 204 on success, or HTTP 404 if it does not exist.",
        ),
    )

    return router
