# src/edutrack/schemas/points.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from edutrack.db.models.enums import PointRuleCondition, PointRuleTrigger

from .base import APIModel, PatchModel


class PointTransactionOut(APIModel):
    id: str
    student_id: str
    teacher_id: str
    points: int
    reason: str
    date: date


class PointRuleParameters(APIModel):
    min_score: Optional[float] = Field(default=None, ge=0, le=100)
    days_early: Optional[int] = Field(default=None, ge=1, le=30)
    improvement_threshold: Optional[float] = Field(default=None, ge=1, le=50)
    subject_id: Optional[str] = None
    grade_level: Optional[int] = Field(default=None, ge=1, le=12)


class PointRuleCreate(APIModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    condition: PointRuleCondition
    points: int = Field(ge=1, le=100)
    trigger: PointRuleTrigger = PointRuleTrigger.TEACHER_SUGGESTION
    is_active: bool = True
    parameters: PointRuleParameters = Field(default_factory=PointRuleParameters)


class PointRuleUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    condition: Optional[PointRuleCondition] = None
    points: Optional[int] = Field(default=None, ge=1, le=100)
    trigger: Optional[PointRuleTrigger] = None
    is_active: Optional[bool] = None
    parameters: Optional[PointRuleParameters] = None


class PointRuleOut(APIModel):
    id: str
    name: str
    description: str
    condition: PointRuleCondition
    points: int
    trigger: PointRuleTrigger
    is_active: bool
    parameters: PointRuleParameters
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SuggestionOut(APIModel):
    id: str
    rule_id: str
    student_id: str
    teacher_id: str
    reason: str
    suggested_points: int
    is_applied: bool
    created_at: Optional[datetime] = None
    applied_at: Optional[datetime] = None


class GenerateSuggestionsIn(APIModel):
    student_id: Optional[str] = None
    class_id: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "GenerateSuggestionsIn":
        if bool(self.student_id) == bool(self.class_id):
            raise ValueError("provide exactly one of student_id or class_id")
        return self


class GenerateSuggestionsOut(APIModel):
    created: list[SuggestionOut]
    auto_applied: list[SuggestionOut]
