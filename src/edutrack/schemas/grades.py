# src/edutrack/schemas/grades.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from edutrack.db.models.enums import GradeStatus

from .base import APIModel, PatchModel


class GradeCreate(APIModel):
    student_id: str
    class_id: str
    subject_or_assignment_name: str = Field(min_length=1, max_length=255)
    score: str = Field(default="", max_length=32)
    max_score: Optional[str] = Field(default=None, max_length=32)
    date_assigned: date
    due_date: Optional[date] = None
    status: GradeStatus = GradeStatus.GRADED
    teacher_comments: Optional[str] = None
    term: Optional[int] = Field(default=None, ge=1, le=3)
    continuous_assessment: Optional[float] = Field(default=None, ge=0, le=100)
    external_examination: Optional[float] = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def _due_after_assigned(self) -> "GradeCreate":
        if self.due_date and self.due_date < self.date_assigned:
            raise ValueError("due_date cannot be before date_assigned")
        return self


class GradeUpdate(PatchModel):
    subject_or_assignment_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    score: Optional[str] = Field(default=None, max_length=32)
    max_score: Optional[str] = Field(default=None, max_length=32)
    date_assigned: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[GradeStatus] = None
    teacher_comments: Optional[str] = None
    term: Optional[int] = Field(default=None, ge=1, le=3)
    continuous_assessment: Optional[float] = Field(default=None, ge=0, le=100)
    external_examination: Optional[float] = Field(default=None, ge=0, le=100)


class GradeOut(APIModel):
    id: str
    student_id: str
    class_id: str
    subject_or_assignment_name: str
    score: str
    max_score: Optional[str] = None
    date_assigned: date
    due_date: Optional[date] = None
    submission_date: Optional[datetime] = None
    status: GradeStatus
    teacher_comments: Optional[str] = None
    term: Optional[int] = None
    continuous_assessment: Optional[float] = None
    external_examination: Optional[float] = None
    liberian_grade: Optional[str] = None
    submitted_to_admin: bool = False


class SubmitToAdminIn(APIModel):
    class_id: str
    term: int = Field(ge=1, le=3)
