"""
Read-only aggregates: the points leaderboard, the Ministry of Education
(MoE) report, the master gradesheet and the per-role dashboards.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from statistics import fmean
from typing import Iterable, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import (
    Grade,
    GradeStatus,
    PointRuleSuggestion,
    PointTransaction,
    SchoolClass,
    SchoolEvent,
    Student,
    Subject,
    Teacher,
    User,
    UserRole,
)

from .common import get_or_404
from .errors import NotFoundError, PermissionDeniedError, ValidationError
from .events import visible_to
from .grades import score_percentage
from .liberian_grading import (
    LIBERIAN_CORE_SUBJECTS,
    LIBERIAN_GRADE_SCALE,
    calculate_aggregate_score,
    check_university_eligibility,
    division_classification,
)
from .messages import unread_count

log = logging.getLogger(__name__)

LEADERBOARD_SORT_KEYS = ("points", "name", "grade")

# Words that identify each core subject in free-text subject/assignment names
CORE_SUBJECT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Language Arts (English)": ("english", "language arts"),
    "Mathematics": ("math",),
    "General Science": ("science",),
    "Social Studies": ("social studies",),
}


def _pct(part: int | float, whole: int | float) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def _avg(values: Iterable[float]) -> float:
    values = list(values)
    return round(fmean(values), 1) if values else 0.0


def _matches(keywords: tuple[str, ...], text: str) -> bool:
    low = text.lower()
    return any(k in low for k in keywords)


# ---------------------------------------------------------------- leaderboard

def rank_students(students: Iterable[Student], *, sort_by: str = "points",
                  descending: Optional[bool] = None) -> list[dict]:
    """
    Order students for display and attach a points rank.

    Rank is competition style on points (ties share a rank, the next rank
    skips), whatever column the display is sorted by.
    """
    if sort_by not in LEADERBOARD_SORT_KEYS:
        raise ValidationError(f"sort_by must be one of {', '.join(LEADERBOARD_SORT_KEYS)}")
    students = list(students)
    if descending is None:
        descending = sort_by == "points"

    by_points = sorted(students, key=lambda s: -s.points)
    rank_of: dict[str, int] = {}
    for pos, s in enumerate(by_points, start=1):
        prev = by_points[pos - 2] if pos > 1 else None
        rank_of[s.id] = rank_of[prev.id] if prev is not None and prev.points == s.points else pos

    if sort_by == "points":
        # alphabetical among equal points regardless of direction
        ordered = sorted(students, key=lambda s: s.name.lower())
        ordered.sort(key=lambda s: s.points, reverse=descending)
    else:
        keys = {
            "name": lambda s: (s.name.lower(), s.id),
            "grade": lambda s: (s.grade, s.name.lower()),
        }
        ordered = sorted(students, key=keys[sort_by], reverse=descending)
    return [
        {"rank": rank_of[s.id], "student_id": s.id, "name": s.name, "grade": s.grade, "points": s.points}
        for s in ordered
    ]


async def leaderboard(db: AsyncSession, *, sort_by: str = "points", descending: Optional[bool] = None,
                      grade: Optional[int] = None, class_id: Optional[str] = None,
                      limit: Optional[int] = None) -> list[dict]:
    stmt = sa.select(Student)
    if grade is not None:
        stmt = stmt.where(Student.grade == grade)
    if class_id is not None:
        cls = await db.get(SchoolClass, class_id)
        if cls is None:
            raise NotFoundError("Class", class_id)
        stmt = stmt.where(Student.id.in_(cls.student_ids or []))
    rows = rank_students((await db.scalars(stmt)).all(), sort_by=sort_by, descending=descending)
    return rows[:limit] if limit else rows


# ---------------------------------------------------------------- MoE report

def _grade_numbers(grades: Iterable[Grade]) -> list[float]:
    out = []
    for g in grades:
        pct = score_percentage(g.score, g.max_score)
        if pct is not None:
            out.append(pct)
    return out


def _credit_rate(grades: list[Grade]) -> float:
    graded = [g for g in grades if g.liberian_grade in LIBERIAN_GRADE_SCALE]
    credits = [g for g in graded if LIBERIAN_GRADE_SCALE[g.liberian_grade].is_credit]
    return _pct(len(credits), len(graded))


def enrollment_stats(students: list[Student]) -> dict:
    by_grade = Counter(s.grade for s in students)
    return {
        "total_students": len(students),
        "by_grade": {g: by_grade[g] for g in sorted(by_grade)},
    }


def performance_stats(students: list[Student], grades: list[Grade], all_grades: list[Grade]) -> dict:
    distribution = {code: 0 for code in LIBERIAN_GRADE_SCALE}
    for g in grades:
        if g.liberian_grade in distribution:
            distribution[g.liberian_grade] += 1

    ready = 0
    for s in students:
        results = [
            {"subject": g.subject_or_assignment_name, "grade": g.liberian_grade}
            for g in grades
            if g.student_id == s.id and g.liberian_grade in LIBERIAN_GRADE_SCALE
        ]
        if results and check_university_eligibility(results).is_eligible:
            ready += 1

    core = {
        subject: _avg(_grade_numbers(
            g for g in grades if _matches(CORE_SUBJECT_KEYWORDS[subject], g.subject_or_assignment_name)
        ))
        for subject in LIBERIAN_CORE_SUBJECTS
    }

    progression = []
    for term in (1, 2, 3):
        term_grades = [g for g in all_grades if g.term == term]
        progression.append({
            "term": term,
            "average": _avg(_grade_numbers(term_grades)),
            "credit_rate": _credit_rate(term_grades),
        })

    return {
        "grade_distribution": distribution,
        "average_score": _avg(_grade_numbers(grades)),
        "credit_pass_rate": _credit_rate(grades),
        "university_ready_students": ready,
        "core_subject_performance": core,
        "term_progression": progression,
    }


def teacher_stats(teachers: list[Teacher], classes: list[SchoolClass], grades: list[Grade],
                  subject_names: dict[str, str]) -> dict:
    workload = []
    effectiveness = []
    per_teacher_students = []
    for t in teachers:
        mine = [c for c in classes if t.id in (c.teacher_ids or [])]
        student_ids = {sid for c in mine for sid in (c.student_ids or [])}
        per_teacher_students.append(len(student_ids))
        workload.append({
            "teacher_id": t.id,
            "name": t.name,
            "classes": len(mine),
            "students": len(student_ids),
            "subjects": [subject_names.get(sid, sid) for sid in (t.subject_ids or [])],
        })
        class_ids = {c.id for c in mine}
        their_grades = [g for g in grades if g.class_id in class_ids]
        effectiveness.append({
            "teacher_id": t.id,
            "name": t.name,
            "average_student_score": _avg(_grade_numbers(their_grades)),
            "credit_pass_rate": _credit_rate(their_grades),
        })

    term_grades = [g for g in grades if g.term is not None]
    return {
        "total_teachers": len(teachers),
        "average_class_size": _avg(len(c.student_ids or []) for c in classes),
        "average_students_per_teacher": _avg(per_teacher_students),
        "grade_submission_rate": _pct(sum(1 for g in term_grades if g.submitted_to_admin), len(term_grades)),
        "workload": workload,
        "effectiveness": effectiveness,
    }


def compliance_stats(subjects: list[Subject], all_grades: list[Grade]) -> dict:
    terms_with_results = {g.term for g in all_grades if g.term in (1, 2, 3)}
    covered = [
        core for core in LIBERIAN_CORE_SUBJECTS
        if any(_matches(CORE_SUBJECT_KEYWORDS[core], s.name) for s in subjects)
    ]
    term_grades = [g for g in all_grades if g.term is not None]
    both_components = [
        g for g in term_grades
        if g.continuous_assessment is not None and g.external_examination is not None
    ]
    return {
        "three_term_compliance": _pct(len(terms_with_results), 3),
        "curriculum_coverage": _pct(len(covered), len(LIBERIAN_CORE_SUBJECTS)),
        "missing_core_subjects": [c for c in LIBERIAN_CORE_SUBJECTS if c not in covered],
        "assessment_method_compliance": _pct(len(both_components), len(term_grades)),
    }


async def moe_report(db: AsyncSession, *, term: Optional[int] = None) -> dict:
    if term is not None and term not in (1, 2, 3):
        raise ValidationError("term must be 1, 2 or 3")
    students = list((await db.scalars(sa.select(Student))).all())
    teachers = list((await db.scalars(sa.select(Teacher).order_by(Teacher.name))).all())
    classes = list((await db.scalars(sa.select(SchoolClass))).all())
    subjects = list((await db.scalars(sa.select(Subject))).all())
    all_grades = list((await db.scalars(sa.select(Grade))).all())
    grades = [g for g in all_grades if term is None or g.term == term]

    report = {
        "term": term,
        "generated_on": date.today(),
        "enrollment": enrollment_stats(students),
        "performance": performance_stats(students, grades, all_grades),
        "teachers": teacher_stats(teachers, classes, grades, {s.id: s.name for s in subjects}),
        "school": {
            "total_classes": len(classes),
            "total_subjects": len(subjects),
            "average_class_size": _avg(len(c.student_ids or []) for c in classes),
        },
        "compliance": compliance_stats(subjects, all_grades),
    }
    log.info("built MoE report (term=%s, %d grades)", term, len(grades))
    return report


# ---------------------------------------------------------------- master gradesheet

def _is_core(name: str) -> bool:
    return any(_matches(keywords, name) for keywords in CORE_SUBJECT_KEYWORDS.values())


def _optional_avg(values: list[float]) -> Optional[float]:
    return _avg(values) if values else None


def student_gradesheet(student: Student, grades: list[Grade]) -> dict:
    """One gradesheet row: term averages, WAEC standing and the report-card lines."""
    lettered = [g for g in grades if g.liberian_grade in LIBERIAN_GRADE_SCALE]
    eligibility = check_university_eligibility(
        {"subject": g.subject_or_assignment_name, "grade": g.liberian_grade} for g in lettered
    )
    aggregate = calculate_aggregate_score([g.liberian_grade for g in lettered]) if lettered else None
    division = division_classification(
        aggregate or 0, eligibility.has_english_credit and eligibility.has_math_credit
    )
    results = sorted(grades, key=lambda g: (g.term or 0, g.subject_or_assignment_name.lower(), g.date_assigned))
    return {
        "student_id": student.id,
        "name": student.name,
        "grade": student.grade,
        "term_averages": {
            term: _optional_avg(_grade_numbers(g for g in grades if g.term == term)) for term in (1, 2, 3)
        },
        "overall_average": _optional_avg(_grade_numbers(grades)),
        "credit_passes": eligibility.credit_passes,
        "university_eligible": eligibility.is_eligible,
        "aggregate_score": aggregate,
        "division": division.division,
        "results": [
            {
                "grade_id": g.id,
                "class_id": g.class_id,
                "subject": g.subject_or_assignment_name,
                "term": g.term,
                "continuous_assessment": g.continuous_assessment,
                "external_examination": g.external_examination,
                "score": g.score,
                "percentage": score_percentage(g.score, g.max_score),
                "liberian_grade": g.liberian_grade,
                "submitted_to_admin": g.submitted_to_admin,
            }
            for g in results
        ],
    }


async def master_gradesheet(db: AsyncSession, *, class_id: Optional[str] = None, term: Optional[int] = None,
                            teacher_id: Optional[str] = None, staff_is_admin: bool = True) -> dict:
    """
    Term results laid out per student, class and subject.

    Admins see every class; teachers (``staff_is_admin=False``) only the
    classes listing ``teacher_id``. Only students with results in the
    selected classes and term appear.
    """
    if term is not None and term not in (1, 2, 3):
        raise ValidationError("term must be 1, 2 or 3")

    classes = list((await db.scalars(sa.select(SchoolClass).order_by(SchoolClass.name))).all())
    if not staff_is_admin:
        classes = [c for c in classes if teacher_id and teacher_id in (c.teacher_ids or [])]
    if class_id is not None:
        chosen = [c for c in classes if c.id == class_id]
        if not chosen:
            await get_or_404(db, SchoolClass, class_id, "Class")
            raise PermissionDeniedError("You can only view gradesheets for classes you teach.",
                                        context={"class_id": class_id})
        classes = chosen

    class_ids = [c.id for c in classes]
    stmt = sa.select(Grade).where(Grade.class_id.in_(class_ids))
    if term is not None:
        stmt = stmt.where(Grade.term == term)
    grades = list((await db.scalars(stmt)).all()) if class_ids else []

    student_ids = {g.student_id for g in grades}
    students = (
        list((await db.scalars(sa.select(Student).where(Student.id.in_(student_ids)).order_by(Student.name))).all())
        if student_ids else []
    )
    rows = [student_gradesheet(s, [g for g in grades if g.student_id == s.id]) for s in students]

    distribution = {code: 0 for code in LIBERIAN_GRADE_SCALE}
    for g in grades:
        if g.liberian_grade in distribution:
            distribution[g.liberian_grade] += 1

    class_rows = []
    for c in classes:
        theirs = [g for g in grades if g.class_id == c.id]
        class_rows.append({
            "class_id": c.id,
            "name": c.name,
            "students": len({g.student_id for g in theirs}),
            "grades": len(theirs),
            "average": _avg(_grade_numbers(theirs)),
            "credit_rate": _credit_rate(theirs),
            "submitted": sum(1 for g in theirs if g.submitted_to_admin),
        })

    by_subject: dict[str, list[Grade]] = {}
    for g in grades:
        by_subject.setdefault(g.subject_or_assignment_name, []).append(g)
    subject_rows = [
        {
            "subject": name,
            "grades": len(items),
            "average": _avg(_grade_numbers(items)),
            "credit_rate": _credit_rate(items),
            "is_core": _is_core(name),
        }
        for name, items in sorted(by_subject.items(), key=lambda kv: kv[0].lower())
    ]

    log.info("built gradesheet (class=%s, term=%s): %d students, %d grades",
             class_id, term, len(rows), len(grades))
    return {
        "class_id": class_id,
        "term": term,
        "total_students": len(rows),
        "total_grades": len(grades),
        "average_score": _avg(_grade_numbers(grades)),
        "credit_pass_rate": _credit_rate(grades),
        "university_eligible": sum(1 for r in rows if r["university_eligible"]),
        "grade_distribution": distribution,
        "students": rows,
        "classes": class_rows,
        "subjects": subject_rows,
    }


# ---------------------------------------------------------------- dashboards

async def _upcoming_events(db: AsyncSession, role: str, limit: int = 5) -> list[SchoolEvent]:
    rows = (
        await db.scalars(
            sa.select(SchoolEvent).where(SchoolEvent.date >= date.today()).order_by(SchoolEvent.date)
        )
    ).all()
    return [ev for ev in rows if visible_to(ev, role)][:limit]


async def _student_summary(db: AsyncSession, student: Student) -> dict:
    txs = (
        await db.scalars(
            sa.select(PointTransaction)
            .where(PointTransaction.student_id == student.id)
            .order_by(PointTransaction.date.desc(), PointTransaction.id)
            .limit(5)
        )
    ).all()
    grades = (
        await db.scalars(
            sa.select(Grade)
            .where(Grade.student_id == student.id)
            .order_by(Grade.date_assigned.desc(), Grade.id)
        )
    ).all()
    today = date.today()
    upcoming = [
        g for g in grades
        if g.status in (GradeStatus.UPCOMING.value, GradeStatus.PENDING_SUBMISSION.value)
        and (g.due_date is None or g.due_date >= today)
    ]
    board = rank_students((await db.scalars(sa.select(Student))).all())
    rank = next((row["rank"] for row in board if row["student_id"] == student.id), None)
    present = sum(1 for r in (student.attendance or []) if r.get("status") == "present")
    return {
        "student": student,
        "rank": rank,
        "attendance_rate": _pct(present, len(student.attendance or [])),
        "recent_points": list(txs),
        "recent_grades": list(grades[:5]),
        "upcoming_assignments": len(upcoming),
    }


async def dashboard_for(db: AsyncSession, user: User) -> dict:
    role = user.role
    out: dict = {"role": role, "unread_messages": await unread_count(db, user)}

    if role == UserRole.ADMIN.value:
        students = (await db.scalars(sa.select(Student))).all()
        classes = (await db.scalars(sa.select(SchoolClass).order_by(SchoolClass.name))).all()
        out.update({
            "total_students": len(students),
            "total_teachers": await db.scalar(sa.select(sa.func.count(Teacher.id))),
            "total_classes": len(classes),
            "total_subjects": await db.scalar(sa.select(sa.func.count(Subject.id))),
            "students_by_grade": enrollment_stats(list(students))["by_grade"],
            "class_sizes": sorted(
                ({"class_id": c.id, "name": c.name, "students": len(c.student_ids or [])} for c in classes),
                key=lambda row: -row["students"],
            ),
            "pending_suggestions": await db.scalar(
                sa.select(sa.func.count(PointRuleSuggestion.id)).where(PointRuleSuggestion.is_applied.is_(False))
            ),
        })

    elif role == UserRole.TEACHER.value:
        classes = [
            c for c in (await db.scalars(sa.select(SchoolClass).order_by(SchoolClass.name))).all()
            if user.teacher_id in (c.teacher_ids or [])
        ]
        class_ids = [c.id for c in classes]
        student_ids = {sid for c in classes for sid in (c.student_ids or [])}
        students = (
            (await db.scalars(sa.select(Student).where(Student.id.in_(student_ids)))).all()
            if student_ids else []
        )
        points = {s.id: s.points for s in students}
        awaiting = await db.scalar(
            sa.select(sa.func.count(Grade.id)).where(
                Grade.class_id.in_(class_ids), Grade.status == GradeStatus.SUBMITTED.value
            )
        ) if class_ids else 0
        out.update({
            "classes": len(classes),
            "students": len(student_ids),
            "assignments_awaiting_grading": awaiting or 0,
            "average_student_points": _avg(points.values()),
            "top_students": rank_students(students)[:5],
            "class_average_points": [
                {"class_id": c.id, "name": c.name,
                 "average_points": _avg(points[s] for s in (c.student_ids or []) if s in points)}
                for c in classes
            ],
            "pending_suggestions": await db.scalar(
                sa.select(sa.func.count(PointRuleSuggestion.id)).where(
                    PointRuleSuggestion.is_applied.is_(False),
                    PointRuleSuggestion.student_id.in_(student_ids),
                )
            ) if student_ids else 0,
        })

    elif role in (UserRole.STUDENT.value, UserRole.PARENT.value):
        student = await db.get(Student, user.student_id) if user.student_id else None
        out["child" if role == UserRole.PARENT.value else "summary"] = (
            await _student_summary(db, student) if student is not None else None
        )

    out["upcoming_events"] = await _upcoming_events(db, role)
    return out
