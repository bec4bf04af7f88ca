from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import APIModel, PatchModel


class SubjectCreate(APIModel):
    # Callers may pick stable ids ("subj_math"); omitted ids are generated.
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class SubjectUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class SubjectOut(APIModel):
    id: str
    name: str
    description: Optional[str] = None
