from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Optional, Union

from pydantic import AfterValidator, Field

from edutrack.db.models.enums import UserRole

from .base import APIModel, PatchModel


def _check_audience(v):
    if isinstance(v, list) and not v:
        raise ValueError("audience must be 'all' or a non-empty list of roles")
    return v


Audience = Annotated[Union[Literal["all"], list[UserRole]], AfterValidator(_check_audience)]


class EventCreate(APIModel):
    title: str = Field(min_length=1, max_length=255)
    date: dt.date
    description: str = ""
    audience: Audience = "all"


class EventUpdate(PatchModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[dt.date] = None
    description: Optional[str] = None
    audience: Optional[Audience] = None


class EventOut(APIModel):
    id: str
    title: str
    date: dt.date
    description: str
    audience: Audience


class CalendarEventOut(EventOut):
    category: str
    is_national_holiday: bool


class AcademicTermOut(APIModel):
    term_number: int
    name: str
    start_month: int
    end_month: int
    description: str
    key_activities: list[str]


class CurrentTermOut(APIModel):
    date: dt.date
    in_session: bool
    term: Optional[AcademicTermOut] = None
    next_term: AcademicTermOut


class CalendarImportOut(APIModel):
    year: int
    created: int
    updated: int
