# src/edutrack/seed.py
"""
Default logins and demo school data for local development.

Both seeders are idempotent: records that already exist (matched by email,
subject id or name) are left alone.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.db.models import PointRule, SchoolClass, Student, Subject, Teacher, User, UserRole
from edutrack.services import accounts, classes, point_suggestions, students, subjects, teachers

log = logging.getLogger(__name__)

DEFAULT_USERS = (
    {"email": "admin@edutrack.com", "password": "admin123", "role": UserRole.ADMIN},
    {"email": "teacher@edutrack.com", "password": "teacher123", "role": UserRole.TEACHER,
     "teacher_name": "Demo Teacher", "teacher_subject_ids": ["subj_math", "subj_sci"]},
    {"email": "student@edutrack.com", "password": "student123", "role": UserRole.STUDENT,
     "student_name": "Demo Student", "student_grade": 5},
)

SUBJECTS = (
    # core subjects required by the Ministry of Education
    ("subj_la", "Language Arts (English)", "Reading, writing, grammar and literature."),
    ("subj_math", "Mathematics", "Arithmetic, algebra and geometry."),
    ("subj_sci", "General Science", "Integrated science: biology, chemistry and physics foundations."),
    ("subj_ss", "Social Studies", "Geography, world history, economics and civics basics."),
    ("subj_libhist", "Liberian History", "Liberian history, culture and national heritage."),
    ("subj_civics", "Civics & Citizenship", "Government structure, rights and civic duties."),
    ("subj_french", "French", "French language instruction."),
    ("subj_pe", "Physical Education", "Sports, fitness and health education."),
    ("subj_arts", "Creative Arts", "Traditional and contemporary Liberian arts, music and drama."),
    ("subj_agri", "Agriculture", "Farming techniques and food security."),
    ("subj_tech", "Technical Education", "Basic technical and vocational skills."),
    ("subj_moral", "Moral & Religious Education", "Ethics, moral values and religious studies."),
)

TEACHERS = (
    ("Mr. Samuel Konneh", ["subj_math", "subj_sci"]),
    ("Mrs. Grace Weah", ["subj_la", "subj_libhist"]),
    ("Prof. James Kollie", ["subj_ss", "subj_civics"]),
)

STUDENTS = (
    ("Aminata Johnson", 5, 150),
    ("Emmanuel Kpakolo", 6, 120),
    ("Fatima Kromah", 5, 200),
    ("Moses Flomo", 7, 75),
    ("Princess Tubman", 6, 180),
    ("Joseph Boakai Jr.", 7, 95),
)

# (name, teacher index, student indexes, subject ids, description)
CLASSES = (
    ("Grade 5 Alpha", 0, [0, 2], ["subj_math"], "Morning session focusing on Mathematics for 5th graders."),
    ("Grade 6 Science Enthusiasts", 1, [1, 4], ["subj_sci"], "Focus on practical science projects."),
    ("Grade 5 Language Arts", 1, [0, 2], ["subj_la"], "Developing reading and writing skills."),
    ("Grade 7 Liberian History", 1, [3, 5], ["subj_libhist"], "Key events and figures in Liberian history."),
    ("Grade 7 Civics", 2, [3, 5], ["subj_civics"], "Rights and responsibilities of Liberian citizens."),
)

POINT_RULES = (
    ("Perfect Weekly Attendance", "Student has perfect attendance for a full week",
     "attendance_perfect_week", 10, {}),
    ("Early Assignment Submission", "Student submits assignment before due date",
     "assignment_submitted_early", 5, {"days_early": 1}),
    ("High Assignment Score", "Student achieves high score on assignment",
     "assignment_high_score", 8, {"min_score": 85}),
    ("Active Participation", "Student shows active participation in class",
     "participation_active", 5, {}),
    ("Excellent Behavior", "Student demonstrates excellent behavior",
     "behavior_excellent", 7, {}),
    ("Significant Improvement", "Student shows significant improvement in performance",
     "improvement_significant", 12, {"improvement_threshold": 10}),
)


async def seed_subjects(db: AsyncSession) -> int:
    created = 0
    for subject_id, name, description in SUBJECTS:
        if await db.get(Subject, subject_id) is None:
            await subjects.create_subject(db, name=name, description=description, subject_id=subject_id)
            created += 1
    return created


async def seed_users(db: AsyncSession) -> list[tuple[str, str, bool]]:
    """Create the default admin/teacher/student logins; returns ``(email, role, created)``."""
    await seed_subjects(db)
    out = []
    for entry in DEFAULT_USERS:
        entry = dict(entry)
        if await accounts.get_user_by_email(db, entry["email"]) is not None:
            log.info("user already exists: %s", entry["email"])
            out.append((entry["email"], entry["role"].value, False))
            continue
        await accounts.create_account(db, **entry)
        out.append((entry["email"], entry["role"].value, True))
    return out


async def seed_demo(db: AsyncSession, *, created_by: str = "seed") -> dict[str, int]:
    """Subjects, teachers, students, classes and point rules for a small Liberian school."""
    counts = {"subjects": await seed_subjects(db), "teachers": 0, "students": 0, "classes": 0, "point_rules": 0}

    teacher_ids = []
    for name, subject_ids in TEACHERS:
        existing = await db.scalar(sa.select(Teacher).where(Teacher.name == name))
        if existing is None:
            existing = await teachers.create_teacher(db, name=name, subject_ids=subject_ids)
            counts["teachers"] += 1
        teacher_ids.append(existing.id)

    student_ids = []
    today = date.today()
    for name, grade, points in STUDENTS:
        existing = await db.scalar(sa.select(Student).where(Student.name == name))
        if existing is None:
            existing = await students.create_student(db, name=name, grade=grade, points=points)
            # a week of attendance so the attendance rules have something to look at
            for offset in range(5):
                await students.mark_attendance(db, existing.id, today - timedelta(days=offset), "present")
            counts["students"] += 1
        student_ids.append(existing.id)

    for name, teacher_idx, student_idxs, subject_ids, description in CLASSES:
        if await db.scalar(sa.select(SchoolClass).where(SchoolClass.name == name)) is not None:
            continue
        await classes.create_class(
            db,
            name=name,
            description=description,
            teacher_ids=[teacher_ids[teacher_idx]],
            student_ids=[student_ids[i] for i in student_idxs],
            subject_ids=subject_ids,
        )
        counts["classes"] += 1

    for name, description, condition, points, parameters in POINT_RULES:
        if await db.scalar(sa.select(PointRule).where(PointRule.name == name)) is not None:
            continue
        await point_suggestions.create_rule(
            db,
            {"name": name, "description": description, "condition": condition,
             "points": points, "parameters": parameters},
            created_by=created_by,
        )
        counts["point_rules"] += 1

    log.info("demo data seeded: %s", counts)
    return counts


async def count_users(db: AsyncSession) -> int:
    return int(await db.scalar(sa.select(sa.func.count(User.id))) or 0)
