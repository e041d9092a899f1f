"""Tests for the temporary grade report endpoints."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from config.settings import settings
from models.grade_reports import GradeReport
from models.grades import GradeEntry
from services.grade_reports import DAY_MS
from services.report_store import ReportStore

from conftest import NOW_MS, STUDENT_UID

GRADES = [
    {"subject": "Matemática", "bimester": 1, "grade": 18, "date": 100},
    {"subject": "Matemática", "bimester": 1, "grade": 10, "date": 200},
    {"subject": "História", "bimester": 1, "grade": 13, "date": 50, "teacherId": "prof-7"},
]


def create(client, headers, grades=GRADES):
    return client.post("/api/grade-reports/create", json={"gradesData": grades}, headers=headers)


def count_reports(db):
    db.expire_all()
    return db.query(GradeReport).count()


def test_create_then_get_returns_same_grades(client, auth_headers, student_profile):
    resp = create(client, auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["expiresAt"] == NOW_MS + 15 * DAY_MS
    assert body["reportUrl"] == f"https://edutok.test/report/{body['reportId']}"

    resp = client.get(f"/api/grade-reports/{body['reportId']}")
    assert resp.status_code == 200
    report = resp.json()["report"]
    assert report["gradesData"] == GRADES
    assert report["createdAt"] == NOW_MS
    assert report["expiresAt"] == report["createdAt"] + 15 * DAY_MS
    assert report["studentUid"] == STUDENT_UID
    assert report["studentName"] == "Ana Souza"
    assert report["studentCpf"] == "123.456.789-09"
    assert report["studentGrade"] == "3re1"


def test_profile_defaults_when_student_has_no_profile(client, auth_headers):
    report_id = create(client, auth_headers).json()["reportId"]
    report = client.get(f"/api/grade-reports/{report_id}").json()["report"]
    assert report["studentName"] == "Aluno"
    assert report["studentCpf"] == ""
    assert report["studentGrade"] == ""


def test_report_ids_are_unique_and_unguessable(client, auth_headers):
    ids = {create(client, auth_headers).json()["reportId"] for _ in range(5)}
    assert len(ids) == 5
    assert all(len(i) >= 32 for i in ids)


def test_legacy_client_payload_round_trips_unchanged(client, auth_headers):
    legacy_grades = [
        {"uid": "uid-aluno-1", "subject": "Matemática", "bimestre": 1, "grade": 18.0,
         "teacher": "Prof. Lima", "date": 100},
        {"uid": "uid-aluno-1", "subject": "Física", "bimestre": 3, "grade": 20, "date": 300},
    ]
    resp = create(client, auth_headers, legacy_grades)
    assert resp.status_code == 200

    report_id = resp.json()["reportId"]
    report = client.get(f"/api/grade-reports/{report_id}").json()["report"]
    assert report["gradesData"] == legacy_grades
    assert all("bimestre" in g and "bimester" not in g for g in report["gradesData"])

    # o resumo continua entendendo a chave antiga
    summary = client.get(f"/api/grade-reports/{report_id}/summary").json()["summary"]
    subjects = {s["subject"]: s for s in summary["subjects"]}
    assert subjects["Física"]["bimesters"]["3"] == 20


def test_missing_authorization_is_rejected_without_writing(client, db):
    resp = create(client, headers={})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"
    assert count_reports(db) == 0


@pytest.mark.parametrize("header", ["Bearer wrong-token", "Basic token-aluno", "Bearer", "token-aluno"])
def test_invalid_authorization_is_rejected(client, db, header):
    resp = create(client, headers={"Authorization": header})
    assert resp.status_code == 401
    assert count_reports(db) == 0


@pytest.mark.parametrize(
    "grade",
    [
        {"subject": "Matemática", "bimester": 5, "grade": 10},
        {"subject": "Matemática", "bimester": 0, "grade": 10},
        {"subject": "Matemática", "bimester": 1, "grade": 25.5},
        {"subject": "Matemática", "bimester": 1, "grade": -1},
        {"subject": "   ", "bimester": 1, "grade": 10},
        {"bimester": 1, "grade": 10},
    ],
)
def test_invalid_grade_records_are_rejected(client, auth_headers, db, grade):
    resp = create(client, auth_headers, [grade])
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert count_reports(db) == 0


def test_missing_grades_data_is_rejected(client, auth_headers):
    resp = client.post("/api/grade-reports/create", json={}, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert "detail" not in resp.json()


def test_persistence_failure_returns_internal_error(client, auth_headers, db, monkeypatch):
    def broken_commit(self):
        raise OperationalError("INSERT", {}, Exception("database is down"))

    monkeypatch.setattr(Session, "commit", broken_commit)
    resp = create(client, auth_headers)
    monkeypatch.undo()

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "database is down" not in resp.text
    assert count_reports(db) == 0


def test_unknown_report_is_not_found(client):
    resp = client.get("/api/grade-reports/never-issued-report-id")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "REPORT_NOT_FOUND"


def test_malformed_report_id_is_not_found(client):
    resp = client.get("/api/grade-reports/abc%20def")
    assert resp.status_code == 404


def test_expiry_boundary(client, auth_headers, clock, db):
    body = create(client, auth_headers).json()
    report_id, expires_at = body["reportId"], body["expiresAt"]
    url = f"/api/grade-reports/{report_id}"

    clock.now = expires_at - 1
    assert client.get(url).status_code == 200

    clock.now = expires_at
    assert client.get(url).status_code == 200

    clock.now = expires_at + 1
    expired = client.get(url)
    assert expired.status_code == 404

    # expirado e inexistente têm a mesma resposta
    unknown = client.get("/api/grade-reports/never-issued-report-id")
    assert expired.json()["error"] == unknown.json()["error"]

    # removido na leitura
    assert count_reports(db) == 0
    clock.now = expires_at - 1
    assert client.get(url).status_code == 404


def test_summary_endpoint(client, auth_headers):
    report_id = create(client, auth_headers).json()["reportId"]
    resp = client.get(f"/api/grade-reports/{report_id}/summary")
    assert resp.status_code == 200
    summary = resp.json()["summary"]
    assert summary["overallAverage"] == pytest.approx(11.5)
    assert (summary["approved"], summary["recovery"], summary["failed"]) == (0, 1, 1)

    subjects = {s["subject"]: s for s in summary["subjects"]}
    assert subjects["Matemática"]["bimesters"]["1"] == 10
    assert subjects["Matemática"]["status"] == "Reprovado"
    assert subjects["História"]["status"] == "Recuperação"


def test_server_side_grades_when_client_payload_is_not_trusted(client, auth_headers, db, monkeypatch):
    db.add(GradeEntry(student_uid=STUDENT_UID, subject="Matemática", bimester=1, grade=9.0, date=10))
    db.add(GradeEntry(student_uid="outro-aluno", subject="Matemática", bimester=1, grade=25.0, date=10))
    db.commit()
    monkeypatch.setattr(settings, "REPORT_TRUST_CLIENT_GRADES", False)

    fabricated = [{"subject": "Matemática", "bimester": 1, "grade": 25}]
    report_id = create(client, auth_headers, fabricated).json()["reportId"]

    grades = client.get(f"/api/grade-reports/{report_id}").json()["report"]["gradesData"]
    assert len(grades) == 1
    assert grades[0]["grade"] == 9.0
    assert grades[0]["subject"] == "Matemática"


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_purge_removes_only_expired_reports(client, auth_headers, clock, db):
    old_id = create(client, auth_headers).json()["reportId"]
    clock.now += 10 * DAY_MS
    new_id = create(client, auth_headers).json()["reportId"]

    deleted = ReportStore(db).purge_expired(NOW_MS + 16 * DAY_MS)

    assert deleted == 1
    db.expire_all()
    assert db.get(GradeReport, old_id) is None
    assert db.get(GradeReport, new_id) is not None
