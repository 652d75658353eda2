from datetime import date


def scan(client, headers, code):
    return client.post("/api/attendance/scan", json={"code": code}, headers=headers)


def forget_recent_scans(client):
    client.app.state.scanner.recent_scans.clear()


def test_scan_unknown_code(client, admin_headers):
    response = scan(client, admin_headers, "123456")
    assert response.status_code == 404


def test_scan_records_first_lesson(client, admin_headers, make_student):
    student = make_student()
    response = scan(client, admin_headers, student["code"])
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["lesson_number"] == 1
    assert body["display_lesson_number"] == 1
    assert body["billing_period"] == 1
    assert body["paid"] is False
    assert body["previous_lesson_absent"] is False
    assert body["attendance"]["status"] == "present"
    assert body["attendance"]["date"] == date.today().isoformat()


def test_repeat_scan_is_rejected(client, admin_headers, make_student):
    student = make_student()
    assert scan(client, admin_headers, student["code"]).status_code == 200
    assert scan(client, admin_headers, student["code"]).status_code == 409
    assert len(client.get("/api/attendance/", headers=admin_headers).json()) == 1


def test_lesson_numbers_grow_across_periods(client, admin_headers, make_student):
    student = make_student()
    for _ in range(9):
        forget_recent_scans(client)
        body = scan(client, admin_headers, student["code"]).json()
    assert body["lesson_number"] == 9
    assert body["display_lesson_number"] == 1
    assert body["billing_period"] == 2


def test_scan_reports_payment(client, admin_headers, make_student):
    student = make_student()
    client.post("/api/payments/", json={"student_id": student["id"], "month": 1}, headers=admin_headers)
    assert scan(client, admin_headers, student["code"]).json()["paid"] is True


def test_payment_after_cached_lookup_is_seen(client, admin_headers, make_student):
    student = make_student()
    assert scan(client, admin_headers, student["code"]).json()["paid"] is False
    client.post("/api/payments/", json={"student_id": student["id"], "month": 1}, headers=admin_headers)
    forget_recent_scans(client)
    assert scan(client, admin_headers, student["code"]).json()["paid"] is True


def test_previous_lesson_absent(client, admin_headers, make_student):
    student = make_student()
    response = client.post(
        "/api/attendance/manual", json={"student_id": student["id"], "status": "absent"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["lesson_number"] == 1

    body = scan(client, admin_headers, student["code"]).json()
    assert body["lesson_number"] == 2
    assert body["previous_lesson_absent"] is True


def test_manual_unknown_student(client, admin_headers):
    response = client.post("/api/attendance/manual", json={"student_id": 42}, headers=admin_headers)
    assert response.status_code == 404


def test_bulk_absence_skips_present_students(client, admin_headers, make_student):
    came = make_student(name="حاضر", group_name="Sat 4 PM")
    missed = make_student(name="غائب", group_name="sat 4 pm")
    other_group = make_student(name="آخر", group_name="Sun 6")
    scan(client, admin_headers, came["code"])

    response = client.post(
        "/api/attendance/bulk-absence",
        json={"group": "SAT 4", "date": date.today().isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["count"] == 1

    records = client.get("/api/attendance/", params={"student_id": missed["id"]}, headers=admin_headers).json()
    assert [(r["status"], r["lesson_number"]) for r in records] == [("absent", 1)]
    assert client.get(
        "/api/attendance/", params={"student_id": other_group["id"]}, headers=admin_headers
    ).json() == []


def test_deleting_latest_record_reuses_its_number(client, admin_headers, make_student):
    student = make_student()
    first = scan(client, admin_headers, student["code"]).json()
    forget_recent_scans(client)
    second = scan(client, admin_headers, student["code"]).json()
    assert second["lesson_number"] == 2

    client.delete(f"/api/attendance/{second['attendance']['id']}", headers=admin_headers)
    forget_recent_scans(client)
    third = scan(client, admin_headers, student["code"]).json()
    assert first["lesson_number"] == 1
    assert third["lesson_number"] == 2


def test_overview_reports_periods(client, admin_headers, make_student):
    student = make_student()
    for _ in range(8):
        forget_recent_scans(client)
        scan(client, admin_headers, student["code"])
    client.post("/api/payments/", json={"student_id": student["id"], "month": 2}, headers=admin_headers)
    client.post("/api/payments/", json={"student_id": student["id"], "month": "2"}, headers=admin_headers)

    overview = client.get(f"/api/students/{student['id']}/overview", headers=admin_headers).json()
    assert len(overview["attendance"]) == 8
    assert overview["attendance"][-1]["display_lesson_number"] == 8
    assert overview["paid_periods"] == [2]
    assert overview["next_lesson_number"] == 9
    assert overview["next_billing_period"] == 2
    assert overview["next_lesson_paid"] is True
