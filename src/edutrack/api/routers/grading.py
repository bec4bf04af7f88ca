# src/edutrack/api/routers/grading.py
from __future__ import annotations

from fastapi import APIRouter

from edutrack.schemas.reports import (
    DivisionOut,
    EligibilityOut,
    FinalGradeIn,
    FinalGradeOut,
    GradeScaleEntry,
    ResultsIn,
)
from edutrack.services import liberian_grading as grading

router = APIRouter(prefix="/grading", tags=["grading"])


@router.get("/scale", response_model=list[GradeScaleEntry])
def scale():
    return list(grading.LIBERIAN_GRADE_SCALE.values())


@router.post("/final-grade", response_model=FinalGradeOut)
def final_grade(payload: FinalGradeIn):
    """30% continuous assessment plus 70% external examination."""
    return grading.calculate_final_grade(payload.continuous_assessment, payload.external_examination)


@router.post("/eligibility", response_model=EligibilityOut)
def eligibility(payload: ResultsIn):
    return grading.check_university_eligibility(r.model_dump() for r in payload.results)


@router.post("/division", response_model=DivisionOut)
def division(payload: ResultsIn):
    results = [r.model_dump() for r in payload.results]
    check = grading.check_university_eligibility(results)
    aggregate = grading.calculate_aggregate_score([r["grade"] for r in results])
    div = grading.division_classification(aggregate, check.has_english_credit and check.has_math_credit)
    return DivisionOut(
        aggregate_score=aggregate,
        division=div.division,
        description=div.description,
        eligibility=EligibilityOut.model_validate(check),
    )
