# src/edutrack/tests/test_grades.py
from __future__ import annotations

import pytest

from edutrack.db.models import UserRole

pytestmark = pytest.mark.anyio


@pytest.fixture
async def classroom(client, admin, teacher, student):
    _, admin_h = admin
    teacher_user, _ = teacher
    pupil, _ = student
    r = await client.post(
        "/classes",
        json={"name": "Grade 5 Alpha", "teacher_ids": [teacher_user.teacher_id], "student_ids": [pupil.student_id]},
        headers=admin_h,
    )
    assert r.status_code == 201, r.text
    return r.json()


def _grade_body(cls, student_id, **extra):
    body = {
        "student_id": student_id,
        "class_id": cls["id"],
        "subject_or_assignment_name": "Mathematics - Term 1",
        "date_assigned": "2025-01-10",
    }
    body.update(extra)
    return body


async def test_ca_and_exam_give_liberian_grade(client, classroom, teacher, student):
    _, teacher_h = teacher
    pupil, _ = student
    r = await client.post(
        "/grades",
        json=_grade_body(classroom, pupil.student_id, continuous_assessment=82, external_examination=86, term=1),
        headers=teacher_h,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["score"] == "85"
    assert body["max_score"] == "100"
    assert body["liberian_grade"] == "A1"
    assert body["status"] == "Graded"
    assert body["submitted_to_admin"] is False


async def test_numeric_scores_are_graded_too(client, classroom, teacher, student):
    _, teacher_h = teacher
    pupil, _ = student
    r = await client.post(
        "/grades", json=_grade_body(classroom, pupil.student_id, score="13/20"), headers=teacher_h
    )
    assert r.json()["liberian_grade"] == "B2"

    r = await client.post(
        "/grades", json=_grade_body(classroom, pupil.student_id, score="B+"), headers=teacher_h
    )
    assert r.json()["liberian_grade"] is None


async def test_grade_rules(client, classroom, teacher, student, make_user):
    _, teacher_h = teacher
    pupil, _ = student
    stranger, _ = await make_user(UserRole.STUDENT, student_name="Not Enrolled")
    _, other_teacher_h = await make_user(UserRole.TEACHER)

    r = await client.post("/grades", json=_grade_body(classroom, stranger.student_id, score="50"), headers=teacher_h)
    assert r.status_code == 422

    r = await client.post("/grades", json=_grade_body(classroom, pupil.student_id, score="50"), headers=other_teacher_h)
    assert r.status_code == 403

    r = await client.post(
        "/grades",
        json=_grade_body(classroom, pupil.student_id, score="50", due_date="2025-01-01"),
        headers=teacher_h,
    )
    assert r.status_code == 422

    r = await client.post(
        "/grades", json=_grade_body(classroom, pupil.student_id, continuous_assessment=120), headers=teacher_h
    )
    assert r.status_code == 422


async def test_student_submits_own_assignment(client, classroom, teacher, student, make_user):
    _, teacher_h = teacher
    pupil, pupil_h = student
    other, other_h = await make_user(UserRole.STUDENT, student_name="Someone Else")

    r = await client.post(
        "/grades",
        json=_grade_body(classroom, pupil.student_id, status="Pending Submission", due_date="2025-01-20"),
        headers=teacher_h,
    )
    gid = r.json()["id"]

    assert (await client.post(f"/grades/{gid}/submit", headers=other_h)).status_code == 403
    assert (await client.post(f"/grades/{gid}/submit", headers=teacher_h)).status_code == 403

    r = await client.post(f"/grades/{gid}/submit", headers=pupil_h)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "Submitted"
    assert r.json()["submission_date"]

    r = await client.patch(f"/grades/{gid}", json={"status": "Graded", "score": "91"}, headers=teacher_h)
    assert r.json()["liberian_grade"] == "A1"
    assert (await client.post(f"/grades/{gid}/submit", headers=pupil_h)).status_code == 409


async def test_grade_listing_is_scoped(client, classroom, admin, teacher, student, make_user):
    _, admin_h = admin
    _, teacher_h = teacher
    pupil, pupil_h = student
    _, other_teacher_h = await make_user(UserRole.TEACHER)

    await client.post("/grades", json=_grade_body(classroom, pupil.student_id, score="70", term=2), headers=teacher_h)

    assert len((await client.get("/grades", headers=admin_h)).json()) == 1
    assert len((await client.get("/grades", headers=teacher_h)).json()) == 1
    assert (await client.get("/grades", headers=other_teacher_h)).json() == []
    assert len((await client.get("/grades", params={"term": 2}, headers=pupil_h)).json()) == 1
    assert (await client.get("/grades", params={"term": 3}, headers=pupil_h)).json() == []
    assert len((await client.get(f"/students/{pupil.student_id}/grades", headers=pupil_h)).json()) == 1


async def test_submit_to_admin_locks_term(client, classroom, admin, teacher, student):
    _, admin_h = admin
    _, teacher_h = teacher
    pupil, _ = student

    first = (await client.post(
        "/grades", json=_grade_body(classroom, pupil.student_id, score="60", term=1), headers=teacher_h
    )).json()
    other_term = (await client.post(
        "/grades", json=_grade_body(classroom, pupil.student_id, score="60", term=2), headers=teacher_h
    )).json()

    r = await client.post("/grades/submit-to-admin", json={"class_id": classroom["id"], "term": 1}, headers=teacher_h)
    assert r.status_code == 200
    assert r.json() == {"class_id": classroom["id"], "term": 1, "submitted": 1}

    r = await client.patch(f"/grades/{first['id']}", json={"score": "99"}, headers=teacher_h)
    assert r.status_code == 409
    r = await client.patch(f"/grades/{other_term['id']}", json={"score": "65"}, headers=teacher_h)
    assert r.status_code == 200

    r = await client.patch(f"/grades/{first['id']}", json={"score": "62"}, headers=admin_h)
    assert r.status_code == 200
    assert r.json()["submitted_to_admin"] is True

    assert (await client.delete(f"/grades/{other_term['id']}", headers=teacher_h)).status_code == 204
