"""
EduTrack service exception hierarchy.

Service functions raise these instead of HTTPException so they stay usable
from the CLI and seed scripts; ``edutrack.main`` maps them to JSON
responses using ``status_code``.
"""

from typing import Any, Dict, Optional


class EduTrackError(Exception):
    """
    Base exception class for all EduTrack service errors.

    Attributes
    ----------
    message : str
        Human-readable error message
    error_code : str
        Machine-readable error code for categorization
    context : Dict[str, Any]
        Additional error context (ids involved, offending values)
    """

    status_code: int = 400
    default_code: str = "edutrack_error"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = dict(context or {})  # copy; callers may reuse theirs

    def to_dict(self) -> Dict[str, Any]:
        """JSON body for the HTTP response."""
        return {"detail": self.message, "error_code": self.error_code, "context": self.context}


class NotFoundError(EduTrackError):
    """A referenced record does not exist."""

    status_code = 404
    default_code = "not_found"

    def __init__(self, entity: str, entity_id: Any, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"{entity} '{entity_id}' not found",
            context={"entity": entity, "id": entity_id},
        )


class ConflictError(EduTrackError):
    """The write clashes with existing state (duplicate email, already applied)."""

    status_code = 409
    default_code = "conflict"


class ValidationError(EduTrackError):
    """Input is well-formed but violates a business rule."""

    status_code = 422
    default_code = "validation_error"


class PermissionDeniedError(EduTrackError):
    """The caller's role or ownership does not allow the operation."""

    status_code = 403
    default_code = "permission_denied"


__all__ = [
    "EduTrackError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "PermissionDeniedError",
]
