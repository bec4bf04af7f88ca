# src/edutrack/schemas/users.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, model_validator

from edutrack.db.models.enums import UserRole

from .base import APIModel


class UserOut(APIModel):
    id: str
    email: EmailStr
    username: str
    role: UserRole
    student_id: Optional[str] = None
    teacher_id: Optional[str] = None
    created_at: Optional[datetime] = None


class RegisterIn(APIModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: UserRole

    # STUDENT
    student_name: Optional[str] = Field(default=None, max_length=255)
    student_grade: Optional[int] = Field(default=None, ge=1, le=12)
    # PARENT
    link_student_id: Optional[str] = None
    # TEACHER
    teacher_name: Optional[str] = Field(default=None, max_length=255)
    teacher_subject_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _role_details(self) -> "RegisterIn":
        if self.role == UserRole.STUDENT and (not self.student_name or self.student_grade is None):
            raise ValueError("student_name and student_grade are required for student accounts")
        if self.role == UserRole.PARENT and not self.link_student_id:
            raise ValueError("link_student_id is required for parent accounts")
        if self.role == UserRole.TEACHER and not self.teacher_name:
            raise ValueError("teacher_name is required for teacher accounts")
        return self


class LoginIn(APIModel):
    email: EmailStr
    password: str


class TokenOut(APIModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class ChangePasswordIn(APIModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)
