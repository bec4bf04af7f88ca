# src/edutrack/db/models/__init__.py
from .enums import (
    AttendanceStatus,
    GradeStatus,
    PointRuleCondition,
    PointRuleTrigger,
    ResourceCategory,
    UserRole,
)
from .users import User
from .students import Student
from .teachers import Teacher
from .subjects import Subject
from .classes import SchoolClass
from .grades import Grade
from .point_transactions import PointTransaction
from .point_rules import PointRule, PointRuleSuggestion
from .messages import Message
from .events import SchoolEvent
from .resources import DocumentResource

__all__ = [
    "AttendanceStatus",
    "GradeStatus",
    "PointRuleCondition",
    "PointRuleTrigger",
    "ResourceCategory",
    "UserRole",
    "User",
    "Student",
    "Teacher",
    "Subject",
    "SchoolClass",
    "Grade",
    "PointTransaction",
    "PointRule",
    "PointRuleSuggestion",
    "Message",
    "SchoolEvent",
    "DocumentResource",
]
