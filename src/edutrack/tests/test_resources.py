# src/edutrack/tests/test_resources.py
from __future__ import annotations

from pathlib import Path

import pytest

from edutrack.core.config import settings
from edutrack.db.models import UserRole

pytestmark = pytest.mark.anyio


@pytest.fixture
async def classroom(client, admin, teacher, student):
    _, admin_h = admin
    teacher_user, _ = teacher
    pupil, _ = student
    r = await client.post(
        "/classes",
        json={"name": "Grade 5 Language Arts", "teacher_ids": [teacher_user.teacher_id],
              "student_ids": [pupil.student_id]},
        headers=admin_h,
    )
    return r.json()


async def _upload(client, headers, class_id, *, name="week 1 notes.txt", content=b"Parts of speech",
                  category="Notes"):
    return await client.post(
        "/resources",
        data={"class_id": class_id, "title": "Week 1 notes", "description": "Nouns and verbs",
              "category": category},
        files={"file": (name, content, "text/plain")},
        headers=headers,
    )


async def test_upload_list_download_delete(client, classroom, teacher, student):
    teacher_user, teacher_h = teacher
    _, pupil_h = student

    r = await _upload(client, teacher_h, classroom["id"], name="../week 1 notes.txt")
    assert r.status_code == 201, r.text
    res = r.json()
    assert res["file_name"] == "week_1_notes.txt"
    assert res["teacher_id"] == teacher_user.teacher_id
    assert res["category"] == "Notes"
    assert res["file_url"] == f"/resources/{res['id']}/download"

    stored = list(Path(settings.UPLOAD_DIR).rglob("*week_1_notes.txt"))
    assert len(stored) == 1

    listed = (await client.get("/resources", params={"class_id": classroom["id"]}, headers=pupil_h)).json()
    assert [x["id"] for x in listed] == [res["id"]]

    dl = await client.get(res["file_url"], headers=pupil_h)
    assert dl.status_code == 200
    assert dl.content == b"Parts of speech"
    assert "week_1_notes.txt" in dl.headers["content-disposition"]

    assert (await client.delete(f"/resources/{res['id']}", headers=pupil_h)).status_code == 403
    assert (await client.delete(f"/resources/{res['id']}", headers=teacher_h)).status_code == 204
    assert not stored[0].exists()
    assert (await client.get(f"/resources/{res['id']}", headers=teacher_h)).status_code == 404


async def test_upload_rules(client, classroom, teacher, make_user, monkeypatch):
    _, teacher_h = teacher
    _, other_h = await make_user(UserRole.TEACHER)

    assert (await _upload(client, other_h, classroom["id"])).status_code == 403
    assert (await _upload(client, teacher_h, "no-such-class")).status_code == 404
    assert (await _upload(client, teacher_h, classroom["id"], content=b"")).status_code == 422
    assert (await _upload(client, teacher_h, classroom["id"], category="Gossip")).status_code == 422

    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 8)
    r = await _upload(client, teacher_h, classroom["id"], content=b"123456789")
    assert r.status_code == 422
    assert r.json()["context"]["max_bytes"] == 8


async def test_non_members_cannot_see_class_resources(client, classroom, teacher, make_user):
    _, teacher_h = teacher
    _, outsider_h = await make_user(UserRole.STUDENT, student_name="Outsider")

    res = (await _upload(client, teacher_h, classroom["id"])).json()
    assert (await client.get("/resources", headers=outsider_h)).json() == []
    assert (await client.get("/resources", params={"class_id": classroom["id"]}, headers=outsider_h)).status_code == 403
    assert (await client.get(f"/resources/{res['id']}", headers=outsider_h)).status_code == 403
    assert (await client.get(f"/resources/{res['id']}/download", headers=outsider_h)).status_code == 403


async def test_missing_file_is_404(client, classroom, teacher):
    _, teacher_h = teacher
    res = (await _upload(client, teacher_h, classroom["id"])).json()
    for path in Path(settings.UPLOAD_DIR).rglob("*"):
        if path.is_file():
            path.unlink()
    assert (await client.get(f"/resources/{res['id']}/download", headers=teacher_h)).status_code == 404
