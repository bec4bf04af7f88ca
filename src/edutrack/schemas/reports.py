# src/edutrack/schemas/reports.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from .base import APIModel
from .events import EventOut
from .grades import GradeOut
from .points import PointTransactionOut
from .students import StudentOut


class LeaderboardEntry(APIModel):
    rank: int
    student_id: str
    name: str
    grade: int
    points: int


# ---- MoE report ----

class EnrollmentStats(APIModel):
    total_students: int
    by_grade: dict[int, int]


class TermProgress(APIModel):
    term: int
    average: float
    credit_rate: float


class PerformanceStats(APIModel):
    grade_distribution: dict[str, int]
    average_score: float
    credit_pass_rate: float
    university_ready_students: int
    core_subject_performance: dict[str, float]
    term_progression: list[TermProgress]


class TeacherWorkload(APIModel):
    teacher_id: str
    name: str
    classes: int
    students: int
    subjects: list[str]


class TeacherEffectiveness(APIModel):
    teacher_id: str
    name: str
    average_student_score: float
    credit_pass_rate: float


class TeacherStats(APIModel):
    total_teachers: int
    average_class_size: float
    average_students_per_teacher: float
    grade_submission_rate: float
    workload: list[TeacherWorkload]
    effectiveness: list[TeacherEffectiveness]


class SchoolStats(APIModel):
    total_classes: int
    total_subjects: int
    average_class_size: float


class ComplianceStats(APIModel):
    three_term_compliance: float
    curriculum_coverage: float
    missing_core_subjects: list[str]
    assessment_method_compliance: float


class MoEReportOut(APIModel):
    term: Optional[int] = None
    generated_on: dt.date
    enrollment: EnrollmentStats
    performance: PerformanceStats
    teachers: TeacherStats
    school: SchoolStats
    compliance: ComplianceStats


# ---- master gradesheet ----

class GradesheetResult(APIModel):
    grade_id: str
    class_id: str
    subject: str
    term: Optional[int] = None
    continuous_assessment: Optional[float] = None
    external_examination: Optional[float] = None
    score: str
    percentage: Optional[float] = None
    liberian_grade: Optional[str] = None
    submitted_to_admin: bool = False


class GradesheetStudent(APIModel):
    student_id: str
    name: str
    grade: int
    term_averages: dict[int, Optional[float]]
    overall_average: Optional[float] = None
    credit_passes: int
    university_eligible: bool
    aggregate_score: Optional[int] = None
    division: str
    results: list[GradesheetResult]


class GradesheetClass(APIModel):
    class_id: str
    name: str
    students: int
    grades: int
    average: float
    credit_rate: float
    submitted: int


class GradesheetSubject(APIModel):
    subject: str
    grades: int
    average: float
    credit_rate: float
    is_core: bool


class GradesheetOut(APIModel):
    class_id: Optional[str] = None
    term: Optional[int] = None
    total_students: int
    total_grades: int
    average_score: float
    credit_pass_rate: float
    university_eligible: int
    grade_distribution: dict[str, int]
    students: list[GradesheetStudent]
    classes: list[GradesheetClass]
    subjects: list[GradesheetSubject]


# ---- dashboards ----

class ClassSize(APIModel):
    class_id: str
    name: str
    students: int


class ClassAveragePoints(APIModel):
    class_id: str
    name: str
    average_points: float


class StudentSummary(APIModel):
    student: StudentOut
    rank: Optional[int] = None
    attendance_rate: float
    recent_points: list[PointTransactionOut]
    recent_grades: list[GradeOut]
    upcoming_assignments: int


class DashboardOut(APIModel):
    """Role-shaped: only the fields relevant to the caller's role are filled."""

    role: str
    unread_messages: int = 0
    upcoming_events: list[EventOut] = Field(default_factory=list)

    # ADMIN
    total_students: Optional[int] = None
    total_teachers: Optional[int] = None
    total_classes: Optional[int] = None
    total_subjects: Optional[int] = None
    students_by_grade: Optional[dict[int, int]] = None
    class_sizes: Optional[list[ClassSize]] = None
    pending_suggestions: Optional[int] = None

    # TEACHER
    classes: Optional[int] = None
    students: Optional[int] = None
    assignments_awaiting_grading: Optional[int] = None
    average_student_points: Optional[float] = None
    top_students: Optional[list[LeaderboardEntry]] = None
    class_average_points: Optional[list[ClassAveragePoints]] = None

    # STUDENT / PARENT
    summary: Optional[StudentSummary] = None
    child: Optional[StudentSummary] = None


# ---- grading calculators ----

class GradeScaleEntry(APIModel):
    grade: str
    description: str
    percentage: str
    min_percentage: int
    points: int
    is_credit: bool


class FinalGradeIn(APIModel):
    continuous_assessment: float = Field(ge=0, le=100)
    external_examination: float = Field(ge=0, le=100)


class FinalGradeOut(APIModel):
    final_score: int
    liberian_grade: str
    grade_info: GradeScaleEntry


class SubjectResult(APIModel):
    subject: str = Field(min_length=1)
    grade: str = Field(pattern=r"^(A1|A2|A3|B2|B3|C4|C5|C6|D7|E8|F9)$")


class ResultsIn(APIModel):
    results: list[SubjectResult] = Field(min_length=1)


class EligibilityOut(APIModel):
    is_eligible: bool
    credit_passes: int
    has_english_credit: bool
    has_math_credit: bool
    missing_requirements: list[str]


class DivisionOut(APIModel):
    aggregate_score: int
    division: str
    description: str
    eligibility: EligibilityOut
