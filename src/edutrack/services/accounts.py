"""
User accounts: registration with role-specific records, login checks and
account removal.
"""
from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from edutrack.auth.passwords import hash_password, verify_password
from edutrack.db.models import Student, Subject, Teacher, User, UserRole

from .common import get_or_404, missing_ids, unique_code
from .errors import ConflictError, PermissionDeniedError, ValidationError

log = logging.getLogger(__name__)


def username_for(email: str) -> str:
    return email.split("@", 1)[0]


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    return await db.scalar(sa.select(User).where(sa.func.lower(User.email) == email.strip().lower()))


async def create_account(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    role: UserRole | str,
    student_name: Optional[str] = None,
    student_grade: Optional[int] = None,
    link_student_id: Optional[str] = None,
    teacher_name: Optional[str] = None,
    teacher_subject_ids: Optional[list[str]] = None,
    allow_admin: bool = True,
) -> User:
    """
    Create a login plus whatever record its role needs.

    STUDENT creates a Student, TEACHER a Teacher (at least one existing
    subject required), PARENT links to an existing student. Everything is
    committed together or not at all.
    """
    role = UserRole(role)
    email = email.strip().lower()

    if await get_user_by_email(db, email) is not None:
        raise ConflictError("This email address is already in use.", context={"email": email})
    if role == UserRole.ADMIN and not allow_admin:
        raise PermissionDeniedError("Administrator accounts cannot be self-registered.")

    user = User(
        email=email,
        username=username_for(email),
        hashed_password=hash_password(password),
        role=role.value,
    )
    db.add(user)
    await db.flush()  # assigns user.id

    if role == UserRole.STUDENT:
        if not student_name or student_grade is None:
            raise ValidationError("Student name and grade are required.")
        student = Student(
            id=await unique_code(db, Student, "ST"),
            name=student_name.strip(),
            grade=int(student_grade),
            points=0,
            attendance=[],
        )
        db.add(student)
        user.student_id = student.id

    elif role == UserRole.TEACHER:
        requested = list(dict.fromkeys(teacher_subject_ids or []))
        unknown = set(await missing_ids(db, Subject, requested))
        valid = [s for s in requested if s not in unknown]
        if not valid:
            raise ValidationError("Please select at least one valid subject.")
        if unknown:
            log.info("ignoring unknown subject ids for %s: %s", email, sorted(unknown))
        teacher = Teacher(
            id=await unique_code(db, Teacher, "TC"),
            user_id=user.id,
            name=(teacher_name or username_for(email)).strip(),
            subject_ids=valid,
        )
        db.add(teacher)
        user.teacher_id = teacher.id

    elif role == UserRole.PARENT:
        student = await db.get(Student, link_student_id) if link_student_id else None
        if student is None:
            raise ValidationError("Could not find student to link parent account.")
        if student.parent_id and student.parent_id != user.id:
            raise ConflictError(
                "This student is already linked to a parent account.",
                context={"student_id": student.id},
            )
        student.parent_id = user.id
        user.student_id = student.id

    await db.commit()
    await db.refresh(user)
    log.info("registered %s account %s (%s)", role.value, user.id, email)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


async def change_password(db: AsyncSession, user: User, current: str, new: str) -> None:
    if not verify_password(current, user.hashed_password):
        raise PermissionDeniedError("Current password is incorrect.")
    user.hashed_password = hash_password(new)
    await db.commit()
    log.info("password changed for user %s", user.id)


async def list_users(db: AsyncSession, role: Optional[UserRole] = None) -> list[User]:
    stmt = sa.select(User).order_by(User.email)
    if role is not None:
        stmt = stmt.where(User.role == UserRole(role).value)
    return list((await db.scalars(stmt)).all())


async def delete_user(db: AsyncSession, user_id: str, *, acting_user_id: Optional[str] = None) -> None:
    """Remove a login; parents are unlinked from their student first."""
    if acting_user_id and user_id == acting_user_id:
        raise ValidationError("You cannot delete your own account.")
    user = await get_or_404(db, User, user_id, "User")

    if user.role == UserRole.PARENT.value:
        await db.execute(
            sa.update(Student).where(Student.parent_id == user.id).values(parent_id=None)
        )
    elif user.role == UserRole.TEACHER.value:
        await db.execute(
            sa.update(Teacher).where(Teacher.user_id == user.id).values(user_id=None)
        )

    await db.delete(user)
    await db.commit()
    log.info("deleted %s user %s", user.role, user_id)
