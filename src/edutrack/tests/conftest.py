# src/edutrack/tests/conftest.py
from __future__ import annotations

import logging
import os
import sys
from typing import Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edutrack.auth.tokens import create_access_token
from edutrack.core.config import settings
from edutrack.db.models import User, UserRole
from edutrack.db.session import build_engine, create_all, get_session
from edutrack.main import create_app
from edutrack.services import accounts, subjects

TEST_PASSWORD = "secret123"


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """
    Ensure test logs go to stdout so they show up under pytest -s or log_cli=true.
    Avoid duplicates if handler is already present.
    """
    root = logging.getLogger()
    want = None
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout:
            want = h
            break
    if want is None:
        want = logging.StreamHandler(sys.stdout)
        want.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(want)

    # Let the user override via TEST_LOG_LEVEL=DEBUG/INFO/WARNING...
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


# ==============================================================
# Database: one throwaway SQLite file per test
# ==============================================================

@pytest.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'edutrack-test.db'}", nullpool=True)
    await create_all(bind=eng)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


# ==============================================================
# Client fixture (in-process app bound to the test database)
# ==============================================================

@pytest.fixture
async def app(sessionmaker, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "ALLOW_ADMIN_REGISTRATION", False)

    application = create_app()

    async def _test_session():
        async with sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_session] = _test_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ==============================================================
# Accounts + bearer headers
# ==============================================================

def auth_headers(user: User) -> dict:
    token, _ = create_access_token(user.id, role=user.role)
    return {"Authorization": f"Bearer {token}", "Accept": "application/json"}


@pytest.fixture
async def math_subject(sessionmaker):
    async with sessionmaker() as session:
        return await subjects.create_subject(
            session, name="Mathematics", description="Arithmetic and algebra", subject_id="subj_math"
        )


@pytest.fixture
def make_user(sessionmaker, math_subject) -> Callable[..., Awaitable[tuple[User, dict]]]:
    """
    Usage in tests:
        admin, admin_h = await make_user(UserRole.ADMIN)
        pupil, pupil_h = await make_user(UserRole.STUDENT, student_name="Ama", student_grade=5)
    Teachers default to the Mathematics subject.
    """
    counter = {"n": 0}

    async def _make(role: UserRole, email: str | None = None, **kw) -> tuple[User, dict]:
        counter["n"] += 1
        role = UserRole(role)
        if role == UserRole.STUDENT:
            kw.setdefault("student_name", f"Student {counter['n']}")
            kw.setdefault("student_grade", 5)
        if role == UserRole.TEACHER:
            kw.setdefault("teacher_name", f"Teacher {counter['n']}")
            kw.setdefault("teacher_subject_ids", [math_subject.id])
        async with sessionmaker() as session:
            user = await accounts.create_account(
                session,
                email=email or f"{role.value.lower()}{counter['n']}@school.org",
                password=TEST_PASSWORD,
                role=role,
                **kw,
            )
        return user, auth_headers(user)

    return _make


@pytest.fixture
async def admin(make_user):
    return await make_user(UserRole.ADMIN)


@pytest.fixture
async def teacher(make_user):
    return await make_user(UserRole.TEACHER)


@pytest.fixture
async def student(make_user):
    return await make_user(UserRole.STUDENT, student_name="Aminata Johnson", student_grade=5)
