"""
Liberian (WAEC) grading scale and the university admission rules built on it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence


@dataclass(frozen=True)
class GradeInfo:
    grade: str
    description: str
    percentage: str
    min_percentage: int
    points: int
    is_credit: bool


# Ordered best to worst; percentage_to_grade walks it top-down.
LIBERIAN_GRADE_SCALE: dict[str, GradeInfo] = {
    info.grade: info
    for info in (
        GradeInfo("A1", "Excellent", "80-100%", 80, 1, True),
        GradeInfo("A2", "Very Good", "75-79%", 75, 2, True),
        GradeInfo("A3", "Good", "70-74%", 70, 3, True),
        GradeInfo("B2", "Good", "65-69%", 65, 4, True),
        GradeInfo("B3", "Good", "60-64%", 60, 5, True),
        GradeInfo("C4", "Credit", "55-59%", 55, 6, True),
        GradeInfo("C5", "Credit", "50-54%", 50, 7, True),
        GradeInfo("C6", "Credit", "45-49%", 45, 8, True),
        GradeInfo("D7", "Pass", "40-44%", 40, 9, False),
        GradeInfo("E8", "Pass", "35-39%", 35, 10, False),
        GradeInfo("F9", "Fail", "0-34%", 0, 11, False),
    )
}

CONTINUOUS_ASSESSMENT_WEIGHT = 0.3
EXTERNAL_EXAMINATION_WEIGHT = 0.7
REQUIRED_CREDIT_PASSES = 5

LIBERIAN_CORE_SUBJECTS = (
    "Language Arts (English)",
    "Mathematics",
    "General Science",
    "Social Studies",
)

WAEC_SUBJECTS = (
    "English Language",
    "Mathematics",
    "Biology",
    "Chemistry",
    "Physics",
    "Geography",
    "History",
    "Literature",
    "Economics",
    "Government",
    "French",
    "Agricultural Science",
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage_to_grade(percentage: float) -> str:
    for info in LIBERIAN_GRADE_SCALE.values():
        if percentage >= info.min_percentage:
            return info.grade
    return "F9"


def grade_info(grade: str) -> GradeInfo:
    try:
        return LIBERIAN_GRADE_SCALE[grade]
    except KeyError:
        raise ValueError(f"unknown Liberian grade: {grade!r}") from None


@dataclass(frozen=True)
class FinalGrade:
    final_score: int
    liberian_grade: str
    grade_info: GradeInfo


def calculate_final_grade(continuous_assessment: float, external_examination: float) -> FinalGrade:
    """30% continuous assessment + 70% external examination, rounded half up."""
    for label, value in (("continuous_assessment", continuous_assessment),
                         ("external_examination", external_examination)):
        if value < 0 or value > 100:
            raise ValueError(f"{label} must be between 0 and 100, got {value}")
    final_score = _round_half_up(
        continuous_assessment * CONTINUOUS_ASSESSMENT_WEIGHT
        + external_examination * EXTERNAL_EXAMINATION_WEIGHT
    )
    letter = percentage_to_grade(final_score)
    return FinalGrade(final_score, letter, LIBERIAN_GRADE_SCALE[letter])


def is_english_subject(subject: str) -> bool:
    low = subject.lower()
    return "english" in low or "language arts" in low


def is_math_subject(subject: str) -> bool:
    return "math" in subject.lower()


@dataclass(frozen=True)
class Eligibility:
    is_eligible: bool
    credit_passes: int
    has_english_credit: bool
    has_math_credit: bool
    missing_requirements: list[str]


def check_university_eligibility(results: Iterable[Mapping[str, str]]) -> Eligibility:
    """
    University admission check over ``[{"subject": ..., "grade": "B3"}, ...]``.

    Minimum is five credit passes (A1-C6) including English/Language Arts and
    Mathematics. The first English and first Mathematics result found are the
    ones that count.
    """
    results = list(results)
    credits = [r for r in results if grade_info(r["grade"]).is_credit]
    english = next((r for r in results if is_english_subject(r["subject"])), None)
    math_result = next((r for r in results if is_math_subject(r["subject"])), None)

    has_english = bool(english) and grade_info(english["grade"]).is_credit
    has_math = bool(math_result) and grade_info(math_result["grade"]).is_credit

    missing: list[str] = []
    if len(credits) < REQUIRED_CREDIT_PASSES:
        missing.append(f"Need {REQUIRED_CREDIT_PASSES - len(credits)} more credit passes")
    if not has_english:
        missing.append("Credit pass in English/Language Arts required")
    if not has_math:
        missing.append("Credit pass in Mathematics required")

    return Eligibility(
        is_eligible=not missing,
        credit_passes=len(credits),
        has_english_credit=has_english,
        has_math_credit=has_math,
        missing_requirements=missing,
    )


def calculate_aggregate_score(grades: Sequence[str]) -> int:
    """Sum of the best six grade points (lower is better; 6 is the best possible)."""
    points = sorted(grade_info(g).points for g in grades)
    return sum(points[:6])


@dataclass(frozen=True)
class Division:
    division: str
    description: str


def division_classification(aggregate_score: int, has_english_math_credit: bool) -> Division:
    if not has_english_math_credit:
        return Division("No Division", "Must pass English and Mathematics with credit")
    if aggregate_score <= 24:
        return Division(
            "Division I", "Excellent performance - eligible for competitive university programs"
        )
    if aggregate_score <= 36:
        return Division("Division II", "Good performance - eligible for most university programs")
    if aggregate_score <= 48:
        return Division(
            "Division III", "Satisfactory performance - eligible for university admission"
        )
    return Division(
        "No Division", "Does not meet minimum requirements for division classification"
    )


__all__ = [
    "CONTINUOUS_ASSESSMENT_WEIGHT",
    "EXTERNAL_EXAMINATION_WEIGHT",
    "Division",
    "Eligibility",
    "FinalGrade",
    "GradeInfo",
    "LIBERIAN_CORE_SUBJECTS",
    "LIBERIAN_GRADE_SCALE",
    "WAEC_SUBJECTS",
    "calculate_aggregate_score",
    "calculate_final_grade",
    "check_university_eligibility",
    "division_classification",
    "grade_info",
    "is_english_subject",
    "is_math_subject",
    "percentage_to_grade",
]
