from io import BytesIO

from openpyxl import load_workbook

from config.settings import settings
from conftest import mark_payload
from services.excel_service import XLSX_MEDIA_TYPE


def test_unknown_pin_is_not_found(client, roster):
    res = client.get("/api/public/student/Z9")

    assert res.status_code == 404
    assert res.json()["success"] is False
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_student_without_records_gets_zero_summary(client, roster):
    res = client.get("/api/public/student/A")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["student"]["name"] == "Asha"
    assert data["overallPercentage"] == 0
    assert data["totalClasses"] == 0
    assert data["dailyRecords"] == []


def test_public_view_needs_no_token(client, roster, monkeypatch):
    monkeypatch.setattr(settings, "API_TOKEN", "s3cret")

    assert client.get("/api/public/student/A").status_code == 200


def test_student_view_applies_presence_threshold(client, roster, monkeypatch):
    monkeypatch.setattr(settings, "PRESENCE_THRESHOLD", 2)
    client.post("/api/attendance/mark", json=mark_payload(period=1, absentees="C"))
    client.post("/api/attendance/mark", json=mark_payload(period=2, absentees="B,C"))
    client.post("/api/attendance/mark", json=mark_payload(period=1, date="2024-01-02"))
    client.post("/api/attendance/mark", json=mark_payload(period=2, date="2024-01-02"))

    a = client.get("/api/public/student/A").json()["data"]
    b = client.get("/api/public/student/B").json()["data"]

    assert a["presenceThreshold"] == 2
    assert (a["overallPercentage"], a["present"], a["absent"]) == (100, 2, 0)
    assert (b["overallPercentage"], b["present"], b["absent"]) == (50, 1, 1)
    assert b["dailyRecords"][0] == {
        "date": "2024-01-01",
        "totalPeriods": 2,
        "presentPeriods": 1,
        "status": "absent",
    }
    assert b["monthlyBreakdown"] == [
        {"month": "January 2024", "percentage": 50, "totalDays": 2, "presentDays": 1},
    ]


def test_student_view_date_range(client, roster, monkeypatch):
    monkeypatch.setattr(settings, "PRESENCE_THRESHOLD", 1)
    client.post("/api/attendance/mark", json=mark_payload(absentees="A"))
    client.post("/api/attendance/mark", json=mark_payload(date="2024-01-02"))

    res = client.get("/api/public/student/A", params={"startDate": "2024-01-02", "endDate": "2024-01-02"})

    assert res.json()["data"]["overallPercentage"] == 100
    assert res.json()["data"]["totalClasses"] == 1


def test_student_view_rejects_bad_range(client, roster):
    res = client.get("/api/public/student/A", params={"startDate": "2024-1-2x"})

    assert res.status_code == 400


def test_student_excel_export(client, roster, monkeypatch):
    monkeypatch.setattr(settings, "PRESENCE_THRESHOLD", 1)
    client.post("/api/attendance/mark", json=mark_payload(absentees="B"))

    res = client.get("/api/public/student/A/excel")

    assert res.status_code == 200
    assert res.headers["content-type"] == XLSX_MEDIA_TYPE
    assert 'filename="A_attendance.xlsx"' in res.headers["content-disposition"]

    wb = load_workbook(BytesIO(res.content))
    assert wb.sheetnames == ["Monthly", "Daily"]
    assert [c.value for c in wb["Monthly"][2]] == ["January 2024", 1, 1, 100]
    assert [c.value for c in wb["Daily"][2]] == ["2024-01-01", 1, 1, "Present"]
