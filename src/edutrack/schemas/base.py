from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class APIModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        extra="ignore",
        populate_by_name=True,
    )


class PatchModel(APIModel):
    """Partial updates: only fields present in the request body are applied."""

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
