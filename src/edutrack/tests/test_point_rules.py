# src/edutrack/tests/test_point_rules.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from edutrack.services.point_rules import (
    PointRuleEngine,
    evaluate_rules_for_students,
    numeric_score,
)

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def _rule(condition, points=10, *, rule_id=None, trigger="teacher_suggestion", active=True, **params):
    return SimpleNamespace(
        id=rule_id or f"rule-{condition}",
        name=condition.replace("_", " ").title(),
        condition=condition,
        points=points,
        trigger=trigger,
        is_active=active,
        parameters=params,
    )


def _student(attendance=(), *, sid="ST0001", grade=5, name="Aminata Johnson"):
    return SimpleNamespace(id=sid, name=name, grade=grade, attendance=list(attendance))


def _grade(score, *, assigned, due=None, submitted=None, class_id="c1", student_id="ST0001", name="Quiz"):
    return SimpleNamespace(
        student_id=student_id,
        class_id=class_id,
        subject_or_assignment_name=name,
        score=score,
        date_assigned=assigned,
        due_date=due,
        submission_date=submitted,
    )


def _tx(points, on, student_id="ST0001"):
    return SimpleNamespace(student_id=student_id, points=points, date=on)


def _present(days):
    return [{"date": (TODAY - timedelta(days=d)).isoformat(), "status": "present"} for d in range(days)]


@pytest.mark.parametrize(
    "raw,value",
    [("87", 87.0), ("18/20", 18.0), ("92%", 92.0), ("B+", 87.0), ("A", 93.0), ("excellent", 0.0), (None, 0.0)],
)
def test_numeric_score(raw, value):
    assert numeric_score(raw) == value


# ------------------------------------------------------------------ attendance

def test_perfect_week_needs_five_present_days():
    engine = PointRuleEngine([_rule("attendance_perfect_week")], now=NOW)
    out = engine.generate_suggestions(_student(_present(5)), teacher_id="TC0001")
    assert len(out) == 1
    assert out[0].suggested_points == 10
    assert "perfect attendance" in out[0].reason
    assert out[0].teacher_id == "TC0001"

    assert engine.generate_suggestions(_student(_present(4)), teacher_id="TC0001") == []


def test_perfect_week_broken_by_absence():
    records = _present(5) + [{"date": (TODAY - timedelta(days=5)).isoformat(), "status": "absent"}]
    engine = PointRuleEngine([_rule("attendance_perfect_week")], now=NOW)
    assert engine.generate_suggestions(_student(records), teacher_id="TC0001") == []


def test_attendance_older_than_a_week_is_ignored():
    old = [{"date": (TODAY - timedelta(days=d)).isoformat(), "status": "present"} for d in range(10, 16)]
    engine = PointRuleEngine([_rule("attendance_perfect_week")], now=NOW)
    assert engine.generate_suggestions(_student(old), teacher_id="TC0001") == []


# ------------------------------------------------------------------ assignments

def test_early_submission():
    grade = _grade(
        "80",
        assigned=TODAY - timedelta(days=5),
        due=TODAY + timedelta(days=3),
        submitted=NOW - timedelta(hours=2),
        name="Fractions worksheet",
    )
    engine = PointRuleEngine([_rule("assignment_submitted_early", 5, days_early=2)], now=NOW)
    out = engine.generate_suggestions(_student(), grades=[grade], teacher_id="TC0001")
    assert len(out) == 1
    assert '"Fractions worksheet" 2 days early' in out[0].reason


def test_early_submission_too_old_or_not_early_enough():
    stale = _grade("80", assigned=TODAY - timedelta(days=9), due=TODAY + timedelta(days=3),
                   submitted=NOW - timedelta(days=3))
    late = _grade("80", assigned=TODAY, due=TODAY, submitted=NOW - timedelta(hours=1))
    engine = PointRuleEngine([_rule("assignment_submitted_early", 5, days_early=1)], now=NOW)
    assert engine.generate_suggestions(_student(), grades=[stale, late], teacher_id="TC0001") == []


def test_high_score_uses_default_threshold():
    engine = PointRuleEngine([_rule("assignment_high_score", 8)], now=NOW)
    high = _grade("91", assigned=TODAY)
    low = _grade("84", assigned=TODAY)
    assert len(engine.generate_suggestions(_student(), grades=[high], teacher_id="t")) == 1
    assert engine.generate_suggestions(_student(), grades=[low], teacher_id="t") == []


def test_high_score_subject_filter_goes_through_classes():
    rule = _rule("assignment_high_score", 8, min_score=90, subject_id="subj_math")
    math_class = SimpleNamespace(id="c-math", student_ids=["ST0001"], subject_ids=["subj_math"])
    sci_class = SimpleNamespace(id="c-sci", student_ids=["ST0001"], subject_ids=["subj_sci"])
    engine = PointRuleEngine([rule], now=NOW)

    in_science = _grade("95", assigned=TODAY, class_id="c-sci")
    assert engine.generate_suggestions(
        _student(), grades=[in_science], classes=[math_class, sci_class], teacher_id="t"
    ) == []

    in_math = _grade("95", assigned=TODAY, class_id="c-math")
    assert len(engine.generate_suggestions(
        _student(), grades=[in_math], classes=[math_class, sci_class], teacher_id="t"
    )) == 1


# ------------------------------------------------------------------ participation / behaviour

def test_active_participation():
    grades = [_grade("70", assigned=TODAY - timedelta(days=1)), _grade("75", assigned=TODAY - timedelta(days=3))]
    engine = PointRuleEngine([_rule("participation_active", 5)], now=NOW)
    assert engine.generate_suggestions(
        _student(), grades=grades, point_transactions=[_tx(3, TODAY)], teacher_id="t"
    )
    assert engine.generate_suggestions(_student(), grades=grades, teacher_id="t") == []


def test_excellent_behaviour():
    records = _present(3) + [{"date": (TODAY - timedelta(days=3)).isoformat(), "status": "late"}]
    engine = PointRuleEngine([_rule("behavior_excellent", 7)], now=NOW)
    # 3 of 4 present is below 80%
    assert engine.generate_suggestions(
        _student(records), point_transactions=[_tx(5, TODAY)], teacher_id="t"
    ) == []
    assert engine.generate_suggestions(
        _student(_present(4)), point_transactions=[_tx(5, TODAY)], teacher_id="t"
    )
    assert engine.generate_suggestions(
        _student(_present(4)), point_transactions=[_tx(-5, TODAY)], teacher_id="t"
    ) == []


def test_significant_improvement():
    older = [_grade("60", assigned=TODAY - timedelta(days=10)), _grade("64", assigned=TODAY - timedelta(days=12))]
    recent = [_grade("78", assigned=TODAY - timedelta(days=2))]
    engine = PointRuleEngine([_rule("improvement_significant", 12, improvement_threshold=10)], now=NOW)
    out = engine.generate_suggestions(_student(), grades=older + recent, teacher_id="t")
    assert len(out) == 1
    assert "improved by 16.0 points" in out[0].reason

    evaluation = engine.evaluate_rule(engine.rules[0], _student(), grades=recent)
    assert not evaluation.should_suggest
    assert evaluation.reason == "Insufficient grade history for improvement assessment"


# ------------------------------------------------------------------ engine plumbing

def test_inactive_rules_and_grade_level_are_skipped():
    rules = [
        _rule("attendance_perfect_week", rule_id="inactive", active=False),
        _rule("attendance_perfect_week", rule_id="grade-7-only", grade_level=7),
        _rule("attendance_perfect_week", rule_id="grade-5-only", grade_level=5),
    ]
    engine = PointRuleEngine(rules, now=NOW)
    out = engine.generate_suggestions(_student(_present(5), grade=5), teacher_id="t")
    assert [s.rule_id for s in out] == ["grade-5-only"]


def test_unknown_condition():
    engine = PointRuleEngine([_rule("teleportation")], now=NOW)
    evaluation = engine.evaluate_rule(engine.rules[0], _student())
    assert evaluation == type(evaluation)(False, "Unknown rule condition")


def test_trigger_is_carried_on_the_award():
    engine = PointRuleEngine([_rule("attendance_perfect_week", trigger="automatic")], now=NOW)
    (award,) = engine.generate_suggestions(_student(_present(5)), teacher_id="t")
    assert award.trigger == "automatic"


def test_evaluate_rules_for_students_splits_history_per_student():
    a = _student(sid="ST0001")
    b = _student(sid="ST0002", name="Moses Flomo")
    grades = [_grade("95", assigned=date(2025, 3, 14), student_id="ST0002")]
    out = evaluate_rules_for_students(
        [_rule("assignment_high_score", 8)], [a, b], grades, [], [], "TC0001", now=NOW
    )
    assert [s.student_id for s in out] == ["ST0002"]


def test_within_window_follows_the_condition():
    engine = PointRuleEngine([], now=NOW)
    week_rule = _rule("attendance_perfect_week")
    day_rule = _rule("assignment_high_score")

    three_days_ago = NOW - timedelta(days=3)
    assert engine.within_window(week_rule, three_days_ago)
    assert not engine.within_window(day_rule, three_days_ago)
    assert engine.within_window(day_rule, NOW - timedelta(hours=6))
    assert not engine.within_window(week_rule, NOW - timedelta(days=8))
    # naive timestamps, as SQLite hands them back, are read as UTC
    assert engine.within_window(week_rule, (NOW - timedelta(days=2)).replace(tzinfo=None))
    assert not engine.within_window(week_rule, None)
