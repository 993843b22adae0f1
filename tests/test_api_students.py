from datetime import datetime, timedelta, timezone
from io import BytesIO

from openpyxl import load_workbook

from app.models.upload import UploadHistory


def _seed(upload):
    upload(
        [
            ["S501", "Quinn Flores", 100, 100],
            ["S502", "Morgan Nguyen", 100, 52],
            ["S503", "Riley Chen", 100, 40],
        ]
    )


def _record(client, student_id):
    return next(s for s in client.get("/api/students").json() if s["student_id"] == student_id)


def test_list_students_newest_first_with_grade(client, upload):
    _seed(upload)

    students = client.get("/api/students").json()

    assert [s["student_id"] for s in students] == ["S503", "S502", "S501"]
    assert {s["student_id"]: s["grade"] for s in students} == {"S501": "A+", "S502": "F", "S503": "F"}
    assert set(students[0]) >= {
        "id",
        "student_id",
        "student_name",
        "total_marks",
        "marks_obtained",
        "percentage",
        "created_at",
    }


def test_update_recomputes_percentage(client, upload):
    _seed(upload)
    record = _record(client, "S502")

    response = client.put(
        f"/api/students/{record['id']}",
        json={"student_name": "Morgan N.", "total_marks": 80, "marks_obtained": 60},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["student_name"] == "Morgan N."
    assert updated["percentage"] == 75.0
    assert updated["grade"] == "B"
    assert _record(client, "S502")["percentage"] == 75.0


def test_update_ignores_client_percentage(client, upload):
    _seed(upload)
    record = _record(client, "S501")

    response = client.post(
        "/api/students/update",
        json={
            "id": record["id"],
            "student_name": "Quinn Flores",
            "total_marks": 50,
            "marks_obtained": 25,
            "percentage": 99,
        },
    )

    assert response.status_code == 200
    assert response.json()["percentage"] == 50.0


def test_update_unknown_id_is_not_found(client):
    response = client.put(
        "/api/students/9999",
        json={"student_name": "Nobody", "total_marks": 80, "marks_obtained": 60},
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"

    response = client.post(
        "/api/students/update",
        json={"id": 9999, "student_name": "Nobody", "total_marks": 80, "marks_obtained": 60},
    )
    assert response.status_code == 404


def test_update_rejects_invalid_input(client, upload):
    _seed(upload)
    record = _record(client, "S501")

    zero_total = client.put(
        f"/api/students/{record['id']}",
        json={"student_name": "Quinn", "total_marks": 0, "marks_obtained": 0},
    )
    missing_name = client.post(
        "/api/students/update",
        json={"id": record["id"], "total_marks": 10, "marks_obtained": 5},
    )
    over_total = client.put(
        f"/api/students/{record['id']}",
        json={"student_name": "Quinn", "total_marks": 10, "marks_obtained": 11},
    )
    infinite = client.put(
        f"/api/students/{record['id']}",
        json={"student_name": "Quinn", "total_marks": "inf", "marks_obtained": "inf"},
    )
    infinite_total = client.post(
        "/api/students/update",
        json={"id": record["id"], "student_name": "Quinn", "total_marks": "inf", "marks_obtained": 5},
    )

    for response in (zero_total, missing_name, over_total, infinite, infinite_total):
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert _record(client, "S501")["percentage"] == 100.0


def test_delete_removes_student(client, upload):
    _seed(upload)
    record = _record(client, "S503")

    response = client.delete(f"/api/students/{record['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Student deleted successfully"}
    assert "S503" not in {s["student_id"] for s in client.get("/api/students").json()}


def test_delete_by_body(client, upload):
    _seed(upload)
    record = _record(client, "S501")

    response = client.post("/api/students/delete", json={"id": record["id"]})

    assert response.status_code == 200
    assert len(client.get("/api/students").json()) == 2


def test_delete_unknown_id_is_not_found(client):
    assert client.delete("/api/students/12345").status_code == 404
    assert client.post("/api/students/delete", json={"id": 12345}).status_code == 404


def test_upload_history_keeps_latest_ten_newest_first(client, db_session):
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i in range(12):
        db_session.add(
            UploadHistory(
                filename=f"upload-{i}.csv",
                students_count=i,
                uploaded_at=start + timedelta(days=i),
            )
        )
    db_session.commit()

    history = client.get("/api/upload-history").json()

    assert len(history) == 10
    assert [h["filename"] for h in history] == [f"upload-{i}.csv" for i in range(11, 1, -1)]
    stamps = [h["uploaded_at"] for h in history]
    assert stamps == sorted(stamps, reverse=True)


def test_stats_on_empty_directory(client):
    response = client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {
        "totalStudents": 0,
        "averagePercentage": 0.0,
        "passCount": 0,
        "failCount": 0,
        "passPercentage": 0.0,
        "topPerformer": None,
    }


def test_stats_summarize_current_students(client, upload):
    _seed(upload)

    stats = client.get("/api/stats").json()

    assert stats["totalStudents"] == 3
    assert stats["averagePercentage"] == 64.0
    assert stats["passCount"] == 1
    assert stats["failCount"] == 2
    assert stats["passPercentage"] == 33.33
    assert stats["topPerformer"]["student_id"] == "S501"


def test_template_download_has_canonical_headers(client):
    response = client.get("/api/students/template")

    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]
    sheet = load_workbook(BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0] == ("Student_ID", "Student_Name", "Total_Marks", "Marks_Obtained")
    assert rows[1] == ("S501", "Quinn Flores", 100, 100)


def test_template_round_trips_through_upload(client):
    template = client.get("/api/students/template").content

    response = client.post(
        "/api/upload",
        files={"file": ("template.xlsx", template, "application/octet-stream")},
    )

    assert response.status_code == 200
    assert response.json()["studentsCount"] == 2


def test_health_reports_database(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Server is running"
    assert body["database"] == "Connected"
    assert "timestamp" in body
    assert response.headers["X-Request-ID"]


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert "GET /api/students" in body["endpoints"]
    assert "POST /api/upload" in body["endpoints"]
