# src/edutrack/tests/test_reports.py
from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from edutrack.db.models import UserRole
from edutrack.services.errors import ValidationError
from edutrack.services.reports import rank_students


def _s(sid, name, points, grade=5):
    return SimpleNamespace(id=sid, name=name, points=points, grade=grade)


# ------------------------------------------------------------------ ranking (pure)

def test_rank_students_competition_ranking():
    rows = rank_students([
        _s("ST1", "Moses Flomo", 75),
        _s("ST2", "Fatima Kromah", 200),
        _s("ST3", "Aminata Johnson", 150),
        _s("ST4", "Princess Tubman", 150),
    ])
    assert [(r["rank"], r["name"]) for r in rows] == [
        (1, "Fatima Kromah"),
        (2, "Aminata Johnson"),
        (2, "Princess Tubman"),
        (4, "Moses Flomo"),
    ]


def test_rank_survives_other_sort_orders():
    students = [_s("ST1", "Zed", 10, grade=7), _s("ST2", "Abe", 30, grade=6), _s("ST3", "Mia", 20, grade=8)]
    by_name = rank_students(students, sort_by="name")
    assert [r["name"] for r in by_name] == ["Abe", "Mia", "Zed"]
    assert [r["rank"] for r in by_name] == [1, 2, 3]

    by_grade_desc = rank_students(students, sort_by="grade", descending=True)
    assert [r["grade"] for r in by_grade_desc] == [8, 7, 6]

    lowest_first = rank_students(students, descending=False)
    assert [r["name"] for r in lowest_first] == ["Zed", "Mia", "Abe"]


def test_rank_students_rejects_unknown_sort():
    with pytest.raises(ValidationError):
        rank_students([], sort_by="height")


# ------------------------------------------------------------------ API

@pytest.fixture
async def school(client, admin, teacher, make_user, math_subject):
    """Two classes, three students with points and a few term grades."""
    _, admin_h = admin
    teacher_user, teacher_h = teacher

    ids = []
    for name, grade, points in (("Aminata Johnson", 5, 150), ("Fatima Kromah", 5, 200), ("Moses Flomo", 7, 75)):
        r = await client.post("/students", json={"name": name, "grade": grade, "points": points}, headers=admin_h)
        ids.append(r.json()["id"])

    math = (await client.post(
        "/classes",
        json={"name": "Grade 5 Alpha", "teacher_ids": [teacher_user.teacher_id], "student_ids": ids[:2],
              "subject_ids": [math_subject.id]},
        headers=admin_h,
    )).json()
    civics = (await client.post(
        "/classes", json={"name": "Grade 7 Civics", "student_ids": ids[2:]}, headers=admin_h
    )).json()

    for sid, ca, exam in ((ids[0], 82, 86), (ids[1], 40, 30)):
        r = await client.post(
            "/grades",
            json={"student_id": sid, "class_id": math["id"], "subject_or_assignment_name": "Mathematics",
                  "date_assigned": "2025-01-15", "term": 2, "continuous_assessment": ca,
                  "external_examination": exam},
            headers=teacher_h,
        )
        assert r.status_code == 201, r.text
    return SimpleNamespace(student_ids=ids, math=math, civics=civics)


@pytest.mark.anyio
async def test_leaderboard_endpoint(client, school, student):
    _, h = student
    rows = (await client.get("/leaderboard", headers=h)).json()
    assert [r["name"] for r in rows[:3]] == ["Fatima Kromah", "Aminata Johnson", "Moses Flomo"]
    assert rows[0]["rank"] == 1

    rows = (await client.get("/leaderboard", params={"grade": 7}, headers=h)).json()
    assert [r["name"] for r in rows] == ["Moses Flomo"]
    assert rows[0]["rank"] == 1

    rows = (await client.get("/leaderboard", params={"class_id": school.math["id"], "limit": 1}, headers=h)).json()
    assert [r["name"] for r in rows] == ["Fatima Kromah"]

    rows = (await client.get("/leaderboard", params={"sort_by": "name", "order": "desc"}, headers=h)).json()
    assert rows[0]["name"] == "Moses Flomo"

    assert (await client.get("/leaderboard", params={"sort_by": "height"}, headers=h)).status_code == 422
    assert (await client.get("/leaderboard", params={"class_id": "nope"}, headers=h)).status_code == 404


@pytest.mark.anyio
async def test_moe_report(client, school, admin, teacher):
    _, admin_h = admin
    _, teacher_h = teacher

    assert (await client.get("/reports/moe", headers=teacher_h)).status_code == 403
    assert (await client.get("/reports/moe", params={"term": 4}, headers=admin_h)).status_code == 422

    r = await client.get("/reports/moe", params={"term": 2}, headers=admin_h)
    assert r.status_code == 200, r.text
    report = r.json()
    assert report["term"] == 2
    assert report["enrollment"]["total_students"] == 3
    assert report["enrollment"]["by_grade"] == {"5": 2, "7": 1}

    perf = report["performance"]
    # 82/86 -> 85 (A1); 40/30 -> 33 (F9)
    assert perf["grade_distribution"]["A1"] == 1
    assert perf["grade_distribution"]["F9"] == 1
    assert perf["average_score"] == 59.0
    assert perf["credit_pass_rate"] == 50.0
    assert perf["core_subject_performance"]["Mathematics"] == 59.0
    assert [t["term"] for t in perf["term_progression"]] == [1, 2, 3]

    teachers = report["teachers"]
    assert teachers["total_teachers"] == 1
    assert teachers["workload"][0]["classes"] == 1
    assert teachers["workload"][0]["students"] == 2
    assert teachers["workload"][0]["subjects"] == ["Mathematics"]
    assert teachers["grade_submission_rate"] == 0.0

    assert report["school"] == {"total_classes": 2, "total_subjects": 1, "average_class_size": 1.5}

    compliance = report["compliance"]
    assert compliance["curriculum_coverage"] == 25.0
    assert "Mathematics" not in compliance["missing_core_subjects"]
    assert compliance["assessment_method_compliance"] == 100.0
    assert compliance["three_term_compliance"] == 33.3


@pytest.mark.anyio
async def test_dashboards_by_role(client, school, admin, teacher, make_user):
    _, admin_h = admin
    teacher_user, teacher_h = teacher

    await client.post(
        "/events",
        json={"title": "Parents' Day", "date": (date.today() + timedelta(days=3)).isoformat()},
        headers=admin_h,
    )

    d = (await client.get("/dashboard", headers=admin_h)).json()
    assert d["role"] == "ADMIN"
    assert d["total_students"] == 3
    assert d["total_classes"] == 2
    assert d["class_sizes"][0]["students"] == 2
    assert [e["title"] for e in d["upcoming_events"]] == ["Parents' Day"]
    assert d["summary"] is None

    d = (await client.get("/dashboard", headers=teacher_h)).json()
    assert d["role"] == "TEACHER"
    assert d["classes"] == 1
    assert d["students"] == 2
    assert d["average_student_points"] == 175.0
    assert [s["name"] for s in d["top_students"]] == ["Fatima Kromah", "Aminata Johnson"]
    assert d["total_students"] is None

    pupil, pupil_h = await make_user(UserRole.STUDENT, student_name="New Pupil", student_grade=5)
    await client.post(
        f"/students/{pupil.student_id}/attendance", json={"date": "2025-03-03", "status": "present"},
        headers=teacher_h,
    )
    await client.post(
        f"/students/{pupil.student_id}/attendance", json={"date": "2025-03-04", "status": "absent"},
        headers=teacher_h,
    )
    await client.post(
        "/messages", json={"recipient_id": pupil.id, "subject": "Welcome", "body": "Hello"}, headers=teacher_h
    )

    d = (await client.get("/dashboard", headers=pupil_h)).json()
    assert d["role"] == "STUDENT"
    assert d["unread_messages"] == 1
    summary = d["summary"]
    assert summary["student"]["id"] == pupil.student_id
    assert summary["rank"] == 4
    assert summary["attendance_rate"] == 50.0

    parent, parent_h = await make_user(UserRole.PARENT, link_student_id=school.student_ids[1])
    d = (await client.get("/dashboard", headers=parent_h)).json()
    assert d["child"]["student"]["name"] == "Fatima Kromah"
    assert d["child"]["rank"] == 1
    assert len(d["child"]["recent_grades"]) == 1


@pytest.mark.anyio
async def test_master_gradesheet(client, school, admin, teacher, student, make_user):
    _, admin_h = admin
    _, teacher_h = teacher
    aminata, fatima = school.student_ids[:2]

    r = await client.post(
        "/grades",
        json={"student_id": aminata, "class_id": school.math["id"], "subject_or_assignment_name": "Mathematics",
              "date_assigned": "2024-10-01", "term": 1, "score": "70"},
        headers=teacher_h,
    )
    assert r.status_code == 201, r.text

    r = await client.get("/grades/gradesheet", params={"class_id": school.math["id"]}, headers=teacher_h)
    assert r.status_code == 200, r.text
    sheet = r.json()
    assert sheet["total_students"] == 2
    assert sheet["total_grades"] == 3
    assert sheet["average_score"] == 62.7
    assert sheet["credit_pass_rate"] == 66.7
    assert sheet["grade_distribution"]["A1"] == 1
    assert sheet["grade_distribution"]["A3"] == 1
    assert sheet["grade_distribution"]["F9"] == 1

    first, second = sheet["students"]
    assert (first["student_id"], second["student_id"]) == (aminata, fatima)
    assert first["term_averages"] == {"1": 70.0, "2": 85.0, "3": None}
    assert first["overall_average"] == 77.5
    assert first["credit_passes"] == 2
    assert first["aggregate_score"] == 4
    assert first["division"] == "No Division"
    assert [res["term"] for res in first["results"]] == [1, 2]
    assert second["term_averages"] == {"1": None, "2": 33.0, "3": None}
    assert second["credit_passes"] == 0

    assert [c["name"] for c in sheet["classes"]] == ["Grade 5 Alpha"]
    assert sheet["classes"][0]["students"] == 2
    assert sheet["subjects"] == [
        {"subject": "Mathematics", "grades": 3, "average": 62.7, "credit_rate": 66.7, "is_core": True}
    ]

    term2 = (await client.get("/grades/gradesheet", params={"term": 2}, headers=teacher_h)).json()
    assert term2["total_grades"] == 2
    assert term2["average_score"] == 59.0
    assert term2["credit_pass_rate"] == 50.0

    everything = (await client.get("/grades/gradesheet", headers=admin_h)).json()
    assert [c["name"] for c in everything["classes"]] == ["Grade 5 Alpha", "Grade 7 Civics"]
    assert everything["classes"][1]["grades"] == 0

    _, other_h = await make_user(UserRole.TEACHER)
    _, pupil_h = student
    assert (await client.get("/grades/gradesheet", params={"class_id": school.math["id"]},
                             headers=other_h)).status_code == 403
    assert (await client.get("/grades/gradesheet", headers=pupil_h)).status_code == 403
    assert (await client.get("/grades/gradesheet", params={"class_id": "nope"}, headers=admin_h)).status_code == 404
    assert (await client.get("/grades/gradesheet", params={"term": 4}, headers=admin_h)).status_code == 422


@pytest.mark.anyio
async def test_grading_calculators(client):
    scale = (await client.get("/grading/scale")).json()
    assert [g["grade"] for g in scale][:3] == ["A1", "A2", "A3"]

    r = (await client.post("/grading/final-grade", json={"continuous_assessment": 82, "external_examination": 86})).json()
    assert r["final_score"] == 85
    assert r["liberian_grade"] == "A1"
    assert r["grade_info"]["description"] == "Excellent"

    results = {"results": [
        {"subject": "English Language", "grade": "A1"},
        {"subject": "Mathematics", "grade": "A2"},
        {"subject": "Biology", "grade": "B2"},
        {"subject": "Chemistry", "grade": "B3"},
        {"subject": "Physics", "grade": "C4"},
        {"subject": "Geography", "grade": "C4"},
    ]}
    r = (await client.post("/grading/eligibility", json=results)).json()
    assert r["is_eligible"] is True
    assert r["credit_passes"] == 6

    r = (await client.post("/grading/division", json=results)).json()
    assert r["aggregate_score"] == 1 + 2 + 4 + 5 + 6 + 6
    assert r["division"] == "Division I"

    bad = await client.post("/grading/division", json={"results": [{"subject": "Maths", "grade": "A9"}]})
    assert bad.status_code == 422
