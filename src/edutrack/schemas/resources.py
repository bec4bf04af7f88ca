from __future__ import annotations

from datetime import datetime
from typing import Optional

from edutrack.db.models.enums import ResourceCategory

from .base import APIModel


class ResourceOut(APIModel):
    id: str
    class_id: str
    teacher_id: str
    title: str
    description: Optional[str] = None
    file_name: str
    file_type: str
    file_url: str
    upload_date: datetime
    category: ResourceCategory
