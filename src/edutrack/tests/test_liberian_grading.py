# src/edutrack/tests/test_liberian_grading.py
import pytest

from edutrack.services.liberian_grading import (
    calculate_aggregate_score,
    calculate_final_grade,
    check_university_eligibility,
    division_classification,
    grade_info,
    percentage_to_grade,
)


@pytest.mark.parametrize(
    "pct,grade",
    [(100, "A1"), (80, "A1"), (79, "A2"), (72, "A3"), (66, "B2"), (60, "B3"),
     (57, "C4"), (50, "C5"), (45, "C6"), (44, "D7"), (35, "E8"), (34, "F9"), (0, "F9")],
)
def test_percentage_to_grade(pct, grade):
    assert percentage_to_grade(pct) == grade


def test_final_grade_weights_and_rounds():
    final = calculate_final_grade(82, 86)  # 24.6 + 60.2 = 84.8
    assert final.final_score == 85
    assert final.liberian_grade == "A1"
    assert final.grade_info.is_credit


def test_final_grade_near_boundaries():
    # 45 * 0.3 + 45 * 0.7 = 45, 55 * 0.3 + 35 * 0.7 = 41
    assert calculate_final_grade(45, 45).liberian_grade == "C6"
    assert calculate_final_grade(55, 35).final_score == 41


def test_final_grade_rejects_out_of_range():
    with pytest.raises(ValueError):
        calculate_final_grade(101, 50)
    with pytest.raises(ValueError):
        calculate_final_grade(50, -1)


def test_unknown_grade():
    with pytest.raises(ValueError):
        grade_info("Z0")


def test_eligible_student():
    results = [
        {"subject": "English Language", "grade": "B3"},
        {"subject": "Mathematics", "grade": "C6"},
        {"subject": "Biology", "grade": "A1"},
        {"subject": "Chemistry", "grade": "C4"},
        {"subject": "History", "grade": "C5"},
        {"subject": "French", "grade": "F9"},
    ]
    out = check_university_eligibility(results)
    assert out.is_eligible
    assert out.credit_passes == 5
    assert out.missing_requirements == []


def test_ineligible_without_math_credit():
    results = [
        {"subject": "Language Arts (English)", "grade": "A1"},
        {"subject": "Mathematics", "grade": "D7"},
        {"subject": "Biology", "grade": "A2"},
    ]
    out = check_university_eligibility(results)
    assert not out.is_eligible
    assert out.has_english_credit
    assert not out.has_math_credit
    assert "Need 3 more credit passes" in out.missing_requirements
    assert "Credit pass in Mathematics required" in out.missing_requirements


def test_aggregate_uses_best_six():
    grades = ["A1", "A1", "A2", "B3", "C4", "C6", "F9"]
    assert calculate_aggregate_score(grades) == 1 + 1 + 2 + 5 + 6 + 8


@pytest.mark.parametrize(
    "aggregate,credit,division",
    [
        (12, True, "Division I"),
        (24, True, "Division I"),
        (30, True, "Division II"),
        (48, True, "Division III"),
        (49, True, "No Division"),
        (6, False, "No Division"),
    ],
)
def test_division_classification(aggregate, credit, division):
    assert division_classification(aggregate, credit).division == division
