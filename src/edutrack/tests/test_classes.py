# src/edutrack/tests/test_classes.py
from __future__ import annotations

import pytest

from edutrack.db.models import UserRole

pytestmark = pytest.mark.anyio


async def test_create_class_checks_members(client, admin, teacher, student, math_subject):
    _, h = admin
    teacher_user, _ = teacher
    pupil, _ = student

    r = await client.post(
        "/classes",
        json={
            "name": "Grade 5 Alpha",
            "description": "Morning session",
            "teacher_ids": [teacher_user.teacher_id],
            "student_ids": [pupil.student_id, pupil.student_id],
            "subject_ids": [math_subject.id],
        },
        headers=h,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["student_ids"] == [pupil.student_id]
    assert body["teacher_ids"] == [teacher_user.teacher_id]

    bad = await client.post("/classes", json={"name": "Ghost class", "student_ids": ["ST9999"]}, headers=h)
    assert bad.status_code == 422
    assert bad.json()["context"] == {"student_ids": ["ST9999"]}


async def test_class_visibility(client, admin, teacher, student, make_user):
    _, admin_h = admin
    teacher_user, teacher_h = teacher
    pupil, pupil_h = student
    outsider, outsider_h = await make_user(UserRole.STUDENT, student_name="Outsider", student_grade=6)

    mine = (await client.post(
        "/classes",
        json={"name": "Grade 5 Alpha", "teacher_ids": [teacher_user.teacher_id], "student_ids": [pupil.student_id]},
        headers=admin_h,
    )).json()
    other = (await client.post("/classes", json={"name": "Grade 7 Civics"}, headers=admin_h)).json()

    r = await client.get("/classes", headers=admin_h)
    assert {c["id"] for c in r.json()} == {mine["id"], other["id"]}

    r = await client.get("/classes", params={"mine": True}, headers=teacher_h)
    assert [c["id"] for c in r.json()] == [mine["id"]]

    r = await client.get("/classes", headers=pupil_h)
    assert [c["id"] for c in r.json()] == [mine["id"]]

    assert (await client.get(f"/classes/{mine['id']}", headers=pupil_h)).status_code == 200
    assert (await client.get(f"/classes/{mine['id']}", headers=outsider_h)).status_code == 403
    assert (await client.get("/classes", headers=outsider_h)).json() == []


async def test_assign_members(client, admin, teacher, student):
    _, h = admin
    teacher_user, teacher_h = teacher
    pupil, _ = student
    cls = (await client.post("/classes", json={"name": "Grade 6 Science"}, headers=h)).json()

    r = await client.put(f"/classes/{cls['id']}/teachers", json={"ids": [teacher_user.teacher_id]}, headers=h)
    assert r.json()["teacher_ids"] == [teacher_user.teacher_id]
    r = await client.put(f"/classes/{cls['id']}/students", json={"ids": [pupil.student_id]}, headers=h)
    assert r.json()["student_ids"] == [pupil.student_id]

    r = await client.put(f"/classes/{cls['id']}/students", json={"ids": ["ST9999"]}, headers=h)
    assert r.status_code == 422
    r = await client.put(f"/classes/{cls['id']}/students", json={"ids": []}, headers=teacher_h)
    assert r.status_code == 403


async def test_class_attendance(client, admin, teacher, student, make_user):
    _, admin_h = admin
    teacher_user, teacher_h = teacher
    pupil, _ = student
    other_teacher, other_h = await make_user(UserRole.TEACHER)
    stranger, _ = await make_user(UserRole.STUDENT, student_name="Stranger")

    cls = (await client.post(
        "/classes",
        json={"name": "Grade 5 Alpha", "teacher_ids": [teacher_user.teacher_id], "student_ids": [pupil.student_id]},
        headers=admin_h,
    )).json()
    url = f"/classes/{cls['id']}/attendance"

    r = await client.post(
        url, json={"date": "2025-02-03", "records": [{"student_id": pupil.student_id, "status": "present"}]},
        headers=teacher_h,
    )
    assert r.status_code == 200, r.text
    assert r.json()[0]["attendance"] == [{"date": "2025-02-03", "status": "present"}]

    r = await client.post(
        url, json={"date": "2025-02-03", "records": [{"student_id": stranger.student_id, "status": "present"}]},
        headers=teacher_h,
    )
    assert r.status_code == 422
    assert r.json()["context"]["student_ids"] == [stranger.student_id]

    r = await client.post(
        url, json={"date": "2025-02-04", "records": [{"student_id": pupil.student_id, "status": "late"}]},
        headers=other_h,
    )
    assert r.status_code == 403


async def test_delete_class_removes_grades(client, admin, teacher, student):
    _, admin_h = admin
    teacher_user, teacher_h = teacher
    pupil, _ = student
    cls = (await client.post(
        "/classes",
        json={"name": "Grade 5 Alpha", "teacher_ids": [teacher_user.teacher_id], "student_ids": [pupil.student_id]},
        headers=admin_h,
    )).json()
    grade = await client.post(
        "/grades",
        json={"student_id": pupil.student_id, "class_id": cls["id"], "subject_or_assignment_name": "Quiz 1",
              "score": "18/20", "date_assigned": "2025-02-03"},
        headers=teacher_h,
    )
    assert grade.status_code == 201, grade.text

    assert (await client.delete(f"/classes/{cls['id']}", headers=teacher_h)).status_code == 403
    assert (await client.delete(f"/classes/{cls['id']}", headers=admin_h)).status_code == 204
    assert (await client.get(f"/grades/{grade.json()['id']}", headers=admin_h)).status_code == 404
    assert (await client.get(f"/classes/{cls['id']}", headers=admin_h)).status_code == 404
