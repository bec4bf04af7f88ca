"""
Point rule engine.

Evaluates active point rules against one student's recorded activity
(attendance, grades, point history) and produces suggested awards. The
engine is pure: it never touches the database, and "now" is injectable so
that results are reproducible.

Inputs are duck-typed. ORM rows from ``edutrack.db.models`` work, as do
pydantic schemas or ``types.SimpleNamespace`` objects with the same
attribute names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

from edutrack.app_logger import get_logger

log = get_logger("services.point_rules")

LETTER_GRADE_SCORES: dict[str, float] = {
    "A+": 97, "A": 93, "A-": 90,
    "B+": 87, "B": 83, "B-": 80,
    "C+": 77, "C": 73, "C-": 70,
    "D+": 67, "D": 63, "D-": 60,
    "F": 50,
}

DEFAULT_MIN_SCORE = 85
DEFAULT_DAYS_EARLY = 1
DEFAULT_IMPROVEMENT_THRESHOLD = 10

# period each condition looks back over; an award inside it is not repeated
EVALUATION_WINDOWS: dict[str, timedelta] = {
    "attendance_perfect_week": timedelta(days=7),
    "assignment_submitted_early": timedelta(days=1),
    "assignment_high_score": timedelta(days=1),
    "participation_active": timedelta(days=7),
    "behavior_excellent": timedelta(days=7),
    "improvement_significant": timedelta(days=7),
}

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class RuleEvaluation:
    should_suggest: bool
    reason: str


@dataclass(frozen=True)
class SuggestedAward:
    rule_id: str
    student_id: str
    teacher_id: str
    reason: str
    suggested_points: int
    trigger: str = "teacher_suggestion"


def numeric_score(score: Any) -> float:
    """
    Best-effort numeric value of a free-text score.

    A leading number wins (``"87"``, ``"18/20"`` -> 18, ``"92%"``), then the
    letter-grade table, otherwise 0.
    """
    if score is None:
        return 0.0
    if isinstance(score, (int, float)):
        return float(score)
    text = str(score)
    m = _LEADING_NUMBER.match(text)
    if m:
        return float(m.group(0))
    return float(LETTER_GRADE_SCORES.get(text.strip(), 0))


def _as_datetime(value: Any) -> Optional[datetime]:
    """Normalise date / datetime / ISO string to an aware UTC datetime (dates at midnight)."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00")) if "T" in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"unsupported date value: {value!r}")


def _param(rule: Any, key: str, default: Any = None) -> Any:
    params = getattr(rule, "parameters", None) or {}
    if not isinstance(params, dict):
        params = params.model_dump() if hasattr(params, "model_dump") else dict(params)
    value = params.get(key)
    # 0 / "" mean "not set", same as a missing key
    return value if value else default


def _value(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else getattr(obj, key, None)


def _enum_value(v: Any) -> Any:
    return getattr(v, "value", v)


class PointRuleEngine:
    """Evaluates a fixed set of rules; inactive rules are dropped up front."""

    def __init__(self, rules: Iterable[Any], *, now: Optional[datetime] = None) -> None:
        self.rules = [r for r in rules if getattr(r, "is_active", True)]
        self.now = _as_datetime(now) if now else datetime.now(timezone.utc)

    # ------------------------------------------------------------------ windows
    @property
    def one_day_ago(self) -> datetime:
        return self.now - timedelta(days=1)

    @property
    def one_week_ago(self) -> datetime:
        return self.now - timedelta(days=7)

    @property
    def two_weeks_ago(self) -> datetime:
        return self.now - timedelta(days=14)

    def within_window(self, rule: Any, when: Any) -> bool:
        """True when ``when`` falls inside the period the rule's condition covers."""
        when = _as_datetime(when)
        window = EVALUATION_WINDOWS.get(_enum_value(rule.condition), timedelta(days=7))
        return when is not None and when >= self.now - window

    # ------------------------------------------------------------------ public
    def generate_suggestions(
        self,
        student: Any,
        *,
        grades: Sequence[Any] = (),
        point_transactions: Sequence[Any] = (),
        classes: Sequence[Any] = (),
        teacher_id: str,
    ) -> list[SuggestedAward]:
        suggestions: list[SuggestedAward] = []
        for rule in self.rules:
            grade_level = _param(rule, "grade_level")
            if grade_level and int(grade_level) != int(student.grade):
                continue

            evaluation = self.evaluate_rule(
                rule, student, grades=grades, point_transactions=point_transactions, classes=classes
            )
            if not evaluation.should_suggest:
                log.debug("rule %s skipped for %s: %s", rule.id, student.id, evaluation.reason)
                continue
            suggestions.append(
                SuggestedAward(
                    rule_id=rule.id,
                    student_id=student.id,
                    teacher_id=teacher_id,
                    reason=evaluation.reason,
                    suggested_points=int(rule.points),
                    trigger=_enum_value(getattr(rule, "trigger", None)) or "teacher_suggestion",
                )
            )
        return suggestions

    def evaluate_rule(
        self,
        rule: Any,
        student: Any,
        *,
        grades: Sequence[Any] = (),
        point_transactions: Sequence[Any] = (),
        classes: Sequence[Any] = (),
    ) -> RuleEvaluation:
        handler = self._HANDLERS.get(_enum_value(rule.condition))
        if handler is None:
            return RuleEvaluation(False, "Unknown rule condition")
        return handler(self, rule, student, list(grades), list(point_transactions), list(classes))

    # ------------------------------------------------------------------ helpers
    def _recent_attendance(self, student: Any) -> list[Any]:
        records = getattr(student, "attendance", None) or []
        out = []
        for rec in records:
            when = _as_datetime(_value(rec, "date"))
            if when is not None and when >= self.one_week_ago:
                out.append(rec)
        return out

    def _assigned_since(self, grades: list[Any], since: datetime, before: Optional[datetime] = None) -> list[Any]:
        out = []
        for g in grades:
            when = _as_datetime(g.date_assigned)
            if when is None or when < since:
                continue
            if before is not None and when >= before:
                continue
            out.append(g)
        return out

    def _subject_filter(self, rule: Any, student: Any, classes: list[Any]):
        """Predicate on grades for the rule's subject (None when no subject is set)."""
        subject_id = _param(rule, "subject_id")
        if not subject_id:
            return None
        eligible = {
            c.id
            for c in classes
            if student.id in (c.student_ids or []) and subject_id in (c.subject_ids or [])
        }
        return lambda g: g.class_id in eligible

    # ------------------------------------------------------------------ conditions
    def _attendance_perfect_week(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        recent = self._recent_attendance(student)
        all_present = all(_enum_value(_value(r, "status")) == "present" for r in recent)
        if len(recent) >= 5 and all_present:
            return RuleEvaluation(
                True,
                f"{student.name} has maintained perfect attendance for the past week ({len(recent)} days)",
            )
        return RuleEvaluation(False, "Perfect attendance criteria not met")

    def _assignment_submitted_early(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        days_early = int(_param(rule, "days_early", DEFAULT_DAYS_EARLY))
        in_subject = self._subject_filter(rule, student, classes)

        for g in grades:
            due = _as_datetime(g.due_date)
            submitted = _as_datetime(g.submission_date)
            if due is None or submitted is None:
                continue
            if in_subject is not None and not in_subject(g):
                continue
            days_difference = (due - submitted) // timedelta(days=1)
            if submitted >= self.one_day_ago and days_difference >= days_early:
                return RuleEvaluation(
                    True,
                    f'{student.name} submitted "{g.subject_or_assignment_name}" {days_early} days early',
                )
        return RuleEvaluation(False, "No early submissions found")

    def _assignment_high_score(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        min_score = _param(rule, "min_score", DEFAULT_MIN_SCORE)
        in_subject = self._subject_filter(rule, student, classes)

        for g in self._assigned_since(grades, self.one_day_ago):
            if in_subject is not None and not in_subject(g):
                continue
            if numeric_score(g.score) >= min_score:
                return RuleEvaluation(
                    True,
                    f'{student.name} scored {g.score} on "{g.subject_or_assignment_name}" '
                    f"(above {min_score}% threshold)",
                )
        return RuleEvaluation(False, "No high scores found")

    def _participation_active(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        recent_grades = self._assigned_since(grades, self.one_week_ago)
        recent_points = [t for t in transactions if _as_datetime(t.date) >= self.one_week_ago]
        if len(recent_grades) >= 2 and len(recent_points) >= 1:
            return RuleEvaluation(
                True,
                f"{student.name} has shown active participation with {len(recent_grades)} recent "
                f"assignments and {len(recent_points)} point transactions",
            )
        return RuleEvaluation(False, "Insufficient recent activity for participation assessment")

    def _behavior_excellent(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        recent = self._recent_attendance(student)
        positive = [
            t for t in transactions if _as_datetime(t.date) >= self.one_week_ago and t.points > 0
        ]
        present = sum(1 for r in recent if _enum_value(_value(r, "status")) == "present")
        good_attendance = len(recent) >= 3 and present / len(recent) >= 0.8
        if good_attendance and positive:
            return RuleEvaluation(
                True,
                f"{student.name} has demonstrated excellent behavior with good attendance "
                "and positive point history",
            )
        return RuleEvaluation(False, "Behavior criteria not met")

    def _improvement_significant(self, rule, student, grades, transactions, classes) -> RuleEvaluation:
        threshold = _param(rule, "improvement_threshold", DEFAULT_IMPROVEMENT_THRESHOLD)
        older = self._assigned_since(grades, self.two_weeks_ago, before=self.one_week_ago)
        recent = self._assigned_since(grades, self.one_week_ago)
        if not older or not recent:
            return RuleEvaluation(False, "Insufficient grade history for improvement assessment")

        older_avg = sum(numeric_score(g.score) for g in older) / len(older)
        recent_avg = sum(numeric_score(g.score) for g in recent) / len(recent)
        improvement = recent_avg - older_avg
        if improvement >= threshold:
            return RuleEvaluation(
                True,
                f"{student.name} has improved by {improvement:.1f} points "
                f"(from {older_avg:.1f}% to {recent_avg:.1f}%)",
            )
        return RuleEvaluation(
            False, f"Improvement of {improvement:.1f} points is below threshold of {threshold}"
        )

    _HANDLERS = {
        "attendance_perfect_week": _attendance_perfect_week,
        "assignment_submitted_early": _assignment_submitted_early,
        "assignment_high_score": _assignment_high_score,
        "participation_active": _participation_active,
        "behavior_excellent": _behavior_excellent,
        "improvement_significant": _improvement_significant,
    }


def evaluate_rules_for_students(
    rules: Iterable[Any],
    students: Iterable[Any],
    grades: Sequence[Any],
    point_transactions: Sequence[Any],
    classes: Sequence[Any],
    teacher_id: str,
    *,
    now: Optional[datetime] = None,
) -> list[SuggestedAward]:
    """Run the engine per student, handing each only their own grades and transactions."""
    engine = PointRuleEngine(rules, now=now)
    out: list[SuggestedAward] = []
    for student in students:
        out.extend(
            engine.generate_suggestions(
                student,
                grades=[g for g in grades if g.student_id == student.id],
                point_transactions=[t for t in point_transactions if t.student_id == student.id],
                classes=classes,
                teacher_id=teacher_id,
            )
        )
    return out


__all__ = [
    "LETTER_GRADE_SCORES",
    "PointRuleEngine",
    "RuleEvaluation",
    "SuggestedAward",
    "evaluate_rules_for_students",
    "numeric_score",
]
