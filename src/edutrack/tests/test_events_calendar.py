# src/edutrack/tests/test_events_calendar.py
from __future__ import annotations

import pytest

pytestmark = pytest.mark.anyio


async def test_event_audience(client, admin, teacher, student):
    _, admin_h = admin
    _, teacher_h = teacher
    _, pupil_h = student

    everyone = (await client.post(
        "/events", json={"title": "Sports Day", "date": "2025-03-20"}, headers=admin_h
    )).json()
    staff_only = (await client.post(
        "/events",
        json={"title": "Staff Meeting", "date": "2025-03-10", "audience": ["TEACHER", "ADMIN"]},
        headers=admin_h,
    ))
    assert staff_only.status_code == 201, staff_only.text
    staff_only = staff_only.json()
    assert staff_only["audience"] == ["TEACHER", "ADMIN"]

    titles = lambda r: [e["title"] for e in r.json()]  # noqa: E731
    assert titles(await client.get("/events", headers=admin_h)) == ["Staff Meeting", "Sports Day"]
    assert titles(await client.get("/events", headers=teacher_h)) == ["Staff Meeting", "Sports Day"]
    assert titles(await client.get("/events", headers=pupil_h)) == ["Sports Day"]

    assert (await client.get(f"/events/{staff_only['id']}", headers=pupil_h)).status_code == 404
    assert (await client.get(f"/events/{everyone['id']}", headers=pupil_h)).status_code == 200

    r = await client.patch(f"/events/{staff_only['id']}", json={"audience": "all"}, headers=admin_h)
    assert r.json()["audience"] == "all"
    assert len((await client.get("/events", headers=pupil_h)).json()) == 2

    assert (await client.post("/events", json={"title": "X", "date": "2025-01-01"}, headers=teacher_h)).status_code == 403
    assert (await client.post(
        "/events", json={"title": "X", "date": "2025-01-01", "audience": []}, headers=admin_h
    )).status_code == 422
    assert (await client.delete(f"/events/{everyone['id']}", headers=admin_h)).status_code == 204


async def test_event_filters(client, admin):
    _, h = admin
    for title, day in (("Opening", "2024-09-02"), ("Exams", "2025-03-15"), ("Closing", "2025-07-20")):
        await client.post("/events", json={"title": title, "date": day}, headers=h)

    names = lambda **p: client.get("/events", params=p, headers=h)  # noqa: E731
    assert [e["title"] for e in (await names(year=2025)).json()] == ["Exams", "Closing"]
    assert [e["title"] for e in (await names(term=1)).json()] == ["Opening"]
    assert [e["title"] for e in (await names(start="2025-01-01", end="2025-05-01")).json()] == ["Exams"]
    assert [e["title"] for e in (await names(limit=1, offset=1)).json()] == ["Exams"]


async def test_calendar_endpoints(client, student):
    _, h = student
    terms = (await client.get("/calendar/terms", headers=h)).json()
    assert [t["term_number"] for t in terms] == [1, 2, 3]
    assert terms[0]["start_month"] == 9

    r = (await client.get("/calendar/current-term", params={"on": "2025-08-10"}, headers=h)).json()
    assert r["in_session"] is False
    assert r["term"] is None
    assert r["next_term"]["term_number"] == 1

    r = (await client.get("/calendar/current-term", params={"on": "2025-02-10"}, headers=h)).json()
    assert r["term"]["term_number"] == 2

    events = (await client.get("/calendar/2024/events", headers=h)).json()
    good_friday = next(e for e in events if e["id"] == "good_friday_2024")
    assert good_friday["date"] == "2024-03-29"
    assert good_friday["is_national_holiday"] is True

    third = (await client.get("/calendar/2024/events", params={"term": 3}, headers=h)).json()
    assert {e["id"] for e in third} >= {"independence_day_2024", "unification_day_2024"}

    assert (await client.get("/calendar/0/events", headers=h)).status_code == 422


async def test_calendar_import_is_idempotent(client, admin, student):
    _, admin_h = admin
    _, pupil_h = student

    assert (await client.post("/calendar/2025/import", headers=pupil_h)).status_code == 403

    first = (await client.post("/calendar/2025/import", headers=admin_h)).json()
    assert first["created"] > 0
    assert first["updated"] == 0

    second = (await client.post("/calendar/2025/import", headers=admin_h)).json()
    assert second == {"year": 2025, "created": 0, "updated": first["created"]}

    stored = (await client.get("/events", params={"year": 2025, "limit": 100}, headers=pupil_h)).json()
    assert len(stored) == first["created"]
    assert any(e["id"] == "independence_day_2025" for e in stored)
