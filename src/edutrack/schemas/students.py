# src/edutrack/schemas/students.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from edutrack.db.models.enums import AttendanceStatus

from .base import APIModel, PatchModel


class AttendanceRecord(APIModel):
    date: date
    status: AttendanceStatus


class StudentCreate(APIModel):
    name: str = Field(min_length=1, max_length=255)
    grade: int = Field(ge=1, le=12)
    points: int = Field(default=0, ge=0)
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class StudentUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    grade: Optional[int] = Field(default=None, ge=1, le=12)
    points: Optional[int] = Field(default=None, ge=0)
    parent_id: Optional[str] = None


class StudentOut(APIModel):
    id: str
    name: str
    grade: int
    points: int
    parent_id: Optional[str] = None
    attendance: list[AttendanceRecord] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttendanceIn(APIModel):
    date: date
    status: AttendanceStatus


class ClassAttendanceEntry(APIModel):
    student_id: str
    status: AttendanceStatus


class ClassAttendanceIn(APIModel):
    date: date
    records: list[ClassAttendanceEntry] = Field(min_length=1)


class AwardPointsIn(APIModel):
    points: int = Field(gt=0, le=1000)
    reason: str = Field(min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason must not be blank")
        return v
