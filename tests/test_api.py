from config.settings import settings
from database.db import get_db
from main import app
from routers import student_assessments
from services.exceptions import UpstreamUnavailable

AUTH = {"Authorization": "Bearer test-token"}


# ==========================================================
# /v1/student/assessments
# ==========================================================

def test_student_payload_shape(client, seeded):
    res = client.get("/v1/student/assessments", params={"studentNumber": 100001, "grade": 10, "cycle": 1})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert set(data) == {"currentCycle", "cycles", "subjects", "resolvedSubject"}
    assert data["currentCycle"]["cycle"] == 1
    assert data["currentCycle"]["start_date"] == "2026-01-01"

    maths, english = data["subjects"]
    assert maths["subjectName"] == "Mathematics"
    assert maths["subjectId"] == 1
    assert maths["timetableAliases"] == ["Maths 1", "Maths 2"]
    assessment = maths["assessments"][0]
    assert assessment["due_date"] == "2026-02-15"
    assert assessment["mark"] == {"obtained": 85, "isPublished": True, "comments": "Good work!"}
    assert english["assessments"] == []
    assert "X-Latency-Ms" in res.headers


def test_student_alias_param(client, seeded):
    res = client.get(
        "/v1/student/assessments",
        params={"studentNumber": 100001, "grade": 10, "cycle": 1, "alias": "maths 2"},
    )
    assert res.json()["data"]["resolvedSubject"] == "Mathematics"


def test_student_missing_grade_is_400(client, seeded):
    res = client.get("/v1/student/assessments", params={"studentNumber": 100001})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


def test_student_non_numeric_number_is_400(client, seeded):
    res = client.get("/v1/student/assessments", params={"studentNumber": "abc", "grade": 10})
    assert res.status_code == 400


def test_nothing_to_show_is_not_an_error(client, seeded):
    res = client.get("/v1/student/assessments", params={"studentNumber": 555555, "grade": 10, "cycle": 1})
    assert res.status_code == 200
    assert res.json()["data"]["subjects"] == []


def test_upstream_failure_is_503(client, monkeypatch):
    def _fail(*args, **kwargs):
        raise UpstreamUnavailable("Failed to fetch assessments")

    monkeypatch.setattr(student_assessments, "get_assessments_for_student", _fail)
    res = client.get("/v1/student/assessments", params={"studentNumber": 100001, "grade": 10})
    assert res.status_code == 503
    assert res.json()["error"] == {"code": "UPSTREAM_UNAVAILABLE", "message": "Failed to fetch assessments"}


def test_mark_fetch_failure_is_503(client, marks_unavailable):
    def _get_failing_db():
        yield marks_unavailable

    app.dependency_overrides[get_db] = _get_failing_db
    res = client.get("/v1/student/assessments", params={"studentNumber": 100001, "grade": 10, "cycle": 1})
    assert res.status_code == 503
    assert res.json()["error"] == {"code": "UPSTREAM_UNAVAILABLE", "message": "Failed to fetch marks"}


# ==========================================================
# auth
# ==========================================================

def test_teacher_routes_need_token(client, seeded):
    assert client.get("/v1/teacher/assessments/", params={"email": "teacher@school.test"}).status_code == 401
    bad = {"Authorization": "Bearer nope"}
    assert client.get("/v1/teacher/assessments/", params={"email": "teacher@school.test"}, headers=bad).status_code == 401
    basic = {"Authorization": "Basic dGVzdA=="}
    assert client.get("/v1/teacher/subjects/", params={"email": "teacher@school.test"}, headers=basic).status_code == 401


def test_unauthorized_uses_error_shape(client, seeded):
    res = client.get("/v1/teacher/assessments/", params={"email": "teacher@school.test"})
    assert res.status_code == 401
    assert res.headers["WWW-Authenticate"] == "Bearer"
    body = res.json()
    assert body["error"] == {"code": "UNAUTHORIZED", "message": "Teacher routes need a Bearer token"}
    assert "latency_ms" in body


def test_teacher_routes_closed_without_configured_token(client, seeded, monkeypatch):
    monkeypatch.setattr(settings, "PORTAL_INTERNAL_TOKEN", None)
    res = client.get("/v1/teacher/subjects/", params={"email": "teacher@school.test"}, headers=AUTH)
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"


def test_unknown_route_and_method_use_error_shape(client):
    res = client.get("/v1/nowhere")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"

    res = client.delete("/v1/student/assessments")
    assert res.status_code == 405
    assert res.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


# ==========================================================
# /v1/teacher/assessments
# ==========================================================

def test_teacher_assessment_lifecycle(client, seeded):
    res = client.post("/v1/teacher/assessments/", headers=AUTH, json={
        "subject_id": 2,
        "teacher_email": "eng@school.test",
        "title": "Poetry essay",
        "due_date": "2026-03-10",
        "max_marks": 50,
        "weighting": 0.2,
        "cycle": 1,
    })
    assert res.status_code == 201
    created = res.json()["data"]
    assert created["subject_name"] == "English"
    assert created["is_test"] is False

    res = client.put(f"/v1/teacher/assessments/{created['id']}", headers=AUTH, json={"title": "Poetry essay (final)"})
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Poetry essay (final)"
    assert res.json()["data"]["max_marks"] == 50

    res = client.get("/v1/teacher/assessments/", params={"email": "eng@school.test"}, headers=AUTH)
    assert [a["title"] for a in res.json()["data"]] == ["Poetry essay (final)"]

    res = client.delete(f"/v1/teacher/assessments/{created['id']}", headers=AUTH)
    assert res.status_code == 200
    assert res.json()["data"]["marks_deleted"] == 0


def test_weighting_must_be_a_fraction(client, seeded):
    res = client.post("/v1/teacher/assessments/", headers=AUTH, json={
        "subject_id": 1,
        "teacher_email": "teacher@school.test",
        "title": "Exam",
        "due_date": "2026-03-20",
        "weighting": 25,
        "cycle": 1,
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


def test_delete_cascades_marks(client, seeded):
    client.post("/v1/teacher/marks/", headers=AUTH, json={"assessment_id": 1, "student_num": 100002, "mark_obtained": 70})
    res = client.delete("/v1/teacher/assessments/1", headers=AUTH)
    assert res.json()["data"]["marks_deleted"] == 2

    res = client.get("/v1/teacher/marks/1", headers=AUTH)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_lowering_max_marks_below_a_mark_is_409(client, seeded):
    res = client.put("/v1/teacher/assessments/1", headers=AUTH, json={"max_marks": 50})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


def test_update_unknown_assessment_is_404(client, seeded):
    res = client.put("/v1/teacher/assessments/99", headers=AUTH, json={"title": "x"})
    assert res.status_code == 404


# ==========================================================
# /v1/teacher/marks
# ==========================================================

def test_mark_upsert_creates_then_overwrites(client, seeded):
    payload = {"assessment_id": 1, "student_num": 100002, "mark_obtained": 55, "teacher_comments": "Revise factorising"}
    res = client.post("/v1/teacher/marks/", headers=AUTH, json=payload)
    assert res.status_code == 201
    mark_id = res.json()["data"]["id"]
    assert res.json()["data"]["is_published"] is False

    res = client.post("/v1/teacher/marks/", headers=AUTH, json={**payload, "mark_obtained": 62})
    assert res.status_code == 200
    assert res.json()["data"]["id"] == mark_id
    assert res.json()["data"]["mark_obtained"] == 62


def test_rescoring_a_published_mark_keeps_it_visible(client, seeded):
    res = client.post("/v1/teacher/marks/", headers=AUTH, json={"assessment_id": 1, "student_num": 100001, "mark_obtained": 90})
    assert res.status_code == 200
    assert res.json()["data"]["is_published"] is True

    params = {"studentNumber": 100001, "grade": 10, "cycle": 1}
    mark = client.get("/v1/student/assessments", params=params).json()["data"]["subjects"][0]["assessments"][0]["mark"]
    assert mark == {"obtained": 90, "isPublished": True, "comments": "Good work!"}


def test_mark_above_max_is_rejected(client, seeded):
    res = client.post("/v1/teacher/marks/", headers=AUTH, json={"assessment_id": 1, "student_num": 100002, "mark_obtained": 101})
    assert res.status_code == 400


def test_mark_for_unknown_assessment_is_404(client, seeded):
    res = client.post("/v1/teacher/marks/", headers=AUTH, json={"assessment_id": 77, "student_num": 100002, "mark_obtained": 1})
    assert res.status_code == 404


def test_roster_lists_enrolled_students_by_surname(client, seeded):
    res = client.get("/v1/teacher/marks/1", headers=AUTH)
    assert res.status_code == 200
    roster = res.json()["data"]
    assert [r["student_name"] for r in roster] == ["Pieter Botha", "Thandi Mokoena"]
    assert roster[0]["mark_id"] is None and roster[0]["is_published"] is False
    assert roster[1]["mark_obtained"] == 85


def test_publish_toggle_is_seen_by_student(client, seeded):
    params = {"studentNumber": 100001, "grade": 10, "cycle": 1}

    res = client.put("/v1/teacher/marks/1/publish", headers=AUTH, json={"is_published": False})
    assert res.json()["data"]["updated"] == 1
    mark = client.get("/v1/student/assessments", params=params).json()["data"]["subjects"][0]["assessments"][0]["mark"]
    assert mark == {"obtained": None, "isPublished": False, "comments": None}

    # teacher still sees the stored score
    assert client.get("/v1/teacher/marks/1", headers=AUTH).json()["data"][1]["mark_obtained"] == 85

    client.put("/v1/teacher/marks/1/publish", headers=AUTH, json={"is_published": True})
    mark = client.get("/v1/student/assessments", params=params).json()["data"]["subjects"][0]["assessments"][0]["mark"]
    assert mark["obtained"] == 85


# ==========================================================
# /v1/teacher/subjects
# ==========================================================

def test_teacher_subjects(client, seeded):
    res = client.get("/v1/teacher/subjects/", params={"email": "teacher@school.test"}, headers=AUTH)
    assert res.json()["data"] == [{"subject_id": 1, "subject_name": "Mathematics"}]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
