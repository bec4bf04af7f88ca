from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import APIModel, PatchModel


class TeacherCreate(APIModel):
    name: str = Field(min_length=1, max_length=255)
    subject_ids: list[str] = Field(default_factory=list)
    user_id: Optional[str] = None


class TeacherUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subject_ids: Optional[list[str]] = None
    user_id: Optional[str] = None


class TeacherOut(APIModel):
    id: str
    name: str
    user_id: Optional[str] = None
    subject_ids: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
