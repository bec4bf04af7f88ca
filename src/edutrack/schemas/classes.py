from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import APIModel, PatchModel


class ClassCreate(APIModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    teacher_ids: list[str] = Field(default_factory=list)
    student_ids: list[str] = Field(default_factory=list)
    subject_ids: list[str] = Field(default_factory=list)


class ClassUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    teacher_ids: Optional[list[str]] = None
    student_ids: Optional[list[str]] = None
    subject_ids: Optional[list[str]] = None


class ClassOut(APIModel):
    id: str
    name: str
    description: str = ""
    teacher_ids: list[str] = Field(default_factory=list)
    student_ids: list[str] = Field(default_factory=list)
    subject_ids: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class AssignIdsIn(APIModel):
    ids: list[str]
