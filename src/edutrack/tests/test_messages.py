# src/edutrack/tests/test_messages.py
from __future__ import annotations

import pytest

from edutrack.db.models import UserRole

pytestmark = pytest.mark.anyio


async def test_message_round(client, teacher, student, make_user):
    teacher_user, teacher_h = teacher
    pupil, pupil_h = student
    _, nosy_h = await make_user(UserRole.STUDENT, student_name="Nosy")

    r = await client.post(
        "/messages",
        json={"recipient_id": pupil.id, "subject": "  Homework  ", "body": "Please finish page 12."},
        headers=teacher_h,
    )
    assert r.status_code == 201, r.text
    msg = r.json()
    assert msg["subject"] == "Homework"
    assert msg["sender_username"] == teacher_user.username
    assert msg["is_read"] is False

    assert (await client.get("/messages/unread-count", headers=pupil_h)).json() == {"unread": 1}
    inbox = (await client.get("/messages/inbox", params={"unread_only": True}, headers=pupil_h)).json()
    assert [m["id"] for m in inbox] == [msg["id"]]
    assert [m["id"] for m in (await client.get("/messages/sent", headers=teacher_h)).json()] == [msg["id"]]

    assert (await client.get(f"/messages/{msg['id']}", headers=nosy_h)).status_code == 403
    assert (await client.post(f"/messages/{msg['id']}/read", headers=teacher_h)).status_code == 403

    r = await client.post(f"/messages/{msg['id']}/read", headers=pupil_h)
    assert r.json()["is_read"] is True
    assert (await client.get("/messages/unread-count", headers=pupil_h)).json() == {"unread": 0}
    assert (await client.get("/messages/inbox", params={"unread_only": True}, headers=pupil_h)).json() == []
    assert len((await client.get("/messages/inbox", headers=pupil_h)).json()) == 1


async def test_message_validation(client, student):
    pupil, pupil_h = student
    r = await client.post("/messages", json={"recipient_id": pupil.id, "subject": "Hi", "body": "me"}, headers=pupil_h)
    assert r.status_code == 422
    r = await client.post("/messages", json={"recipient_id": "nobody", "subject": "Hi", "body": "x"}, headers=pupil_h)
    assert r.status_code == 404
    r = await client.post("/messages", json={"recipient_id": pupil.id, "subject": "", "body": "x"}, headers=pupil_h)
    assert r.status_code == 422
    assert (await client.post("/messages", json={"recipient_id": pupil.id, "subject": "a", "body": "b"})).status_code == 401
