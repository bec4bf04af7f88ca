# src/edutrack/db/models/enums.py
from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    PARENT = "PARENT"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class GradeStatus(str, enum.Enum):
    UPCOMING = "Upcoming"
    PENDING_SUBMISSION = "Pending Submission"
    SUBMITTED = "Submitted"
    GRADED = "Graded"


class PointRuleCondition(str, enum.Enum):
    ATTENDANCE_PERFECT_WEEK = "attendance_perfect_week"
    ASSIGNMENT_SUBMITTED_EARLY = "assignment_submitted_early"
    ASSIGNMENT_HIGH_SCORE = "assignment_high_score"
    PARTICIPATION_ACTIVE = "participation_active"
    BEHAVIOR_EXCELLENT = "behavior_excellent"
    IMPROVEMENT_SIGNIFICANT = "improvement_significant"


class PointRuleTrigger(str, enum.Enum):
    TEACHER_SUGGESTION = "teacher_suggestion"
    AUTOMATIC = "automatic"


class ResourceCategory(str, enum.Enum):
    NOTES = "Notes"
    ASSIGNMENT_BRIEF = "Assignment Brief"
    READING_MATERIAL = "Reading Material"
    OTHER = "Other Resource"


__all__ = [
    "UserRole",
    "AttendanceStatus",
    "GradeStatus",
    "PointRuleCondition",
    "PointRuleTrigger",
    "ResourceCategory",
]
