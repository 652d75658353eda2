from tutoring.core.config import settings


def test_login_wrong_password(client):
    response = client.post("/api/auth/login", json={"phone": settings.ADMIN_PHONE, "password": "nope"})
    assert response.status_code == 401


def test_admin_me(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_requires_token(client):
    assert client.get("/api/students/").status_code == 401


def test_logout_revokes_token(client, admin_headers):
    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 401


def test_create_student_generates_credentials(client, make_student):
    student = make_student()
    assert len(student["code"]) == 6 and student["code"].isdigit()
    password = student["password"]
    assert len(password) == 5 and len(set(password)) == 5


def test_student_login_and_access(client, make_student, login):
    me = make_student(name="سارة", phone="01000000001")
    other = make_student(name="منى", phone="01000000002")
    headers = login("01000000001", me["password"])

    assert client.get("/api/auth/me", headers=headers).json()["role"] == "student"
    assert client.get(f"/api/students/{me['id']}/overview", headers=headers).status_code == 200
    assert client.get(f"/api/students/{other['id']}/overview", headers=headers).status_code == 403
    assert client.get("/api/students/", headers=headers).status_code == 403


def test_parent_sees_only_their_child(client, admin_headers, make_student, login):
    child = make_student(name="يوسف", phone="01000000003")
    other = make_student(name="عمر", phone="01000000004")
    response = client.post(
        "/api/parents/",
        json={"phone": "01099999999", "student_code": child["code"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    parent = response.json()
    assert parent["student_name"] == "يوسف"

    headers = login("01099999999", parent["password"])
    assert client.get(f"/api/students/{child['id']}/overview", headers=headers).status_code == 200
    assert client.get(f"/api/students/{other['id']}/overview", headers=headers).status_code == 403


def test_parent_with_unknown_code(client, admin_headers):
    response = client.post(
        "/api/parents/", json={"phone": "01099999999", "student_code": "000000"}, headers=admin_headers
    )
    assert response.status_code == 404


def test_list_filters_by_group(client, admin_headers, make_student):
    make_student(name="أ", phone="1", group_name="السبت 4")
    make_student(name="ب", phone="2", group_name="الأحد 6")
    response = client.get("/api/students/", params={"group": "السبت"}, headers=admin_headers)
    assert [s["name"] for s in response.json()] == ["أ"]


def test_by_code_lookup(client, admin_headers, make_student):
    student = make_student()
    response = client.get(f"/api/students/by-code/{student['code']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["id"] == student["id"]
    assert client.get("/api/students/by-code/999999x", headers=admin_headers).status_code == 404


def test_delete_student_cascades(client, admin_headers, make_student):
    student = make_student()
    client.post("/api/attendance/scan", json={"code": student["code"]}, headers=admin_headers)
    client.post("/api/payments/", json={"student_id": student["id"], "month": 1}, headers=admin_headers)
    client.post(
        "/api/parents/", json={"phone": "0155", "student_code": student["code"]}, headers=admin_headers
    )

    response = client.delete(f"/api/students/{student['id']}", headers=admin_headers)
    assert response.status_code == 200

    assert client.get("/api/attendance/", headers=admin_headers).json() == []
    assert client.get("/api/payments/", headers=admin_headers).json() == []
    assert client.get("/api/parents/", headers=admin_headers).json() == []
    assert client.post(
        "/api/attendance/scan", json={"code": student["code"]}, headers=admin_headers
    ).status_code == 404


def test_logout_survives_a_flood_of_other_revocations(client, admin_headers):
    from tutoring.core.security import revoked_tokens

    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200
    for i in range(10001):
        revoked_tokens.set(f"other-{i}", True)
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 401


def test_other_sessions_stay_valid_after_logout(client, login):
    first = login(settings.ADMIN_PHONE, settings.ADMIN_PASSWORD)
    second = login(settings.ADMIN_PHONE, settings.ADMIN_PASSWORD)
    client.post("/api/auth/logout", headers=first)
    assert client.get("/api/auth/me", headers=first).status_code == 401
    assert client.get("/api/auth/me", headers=second).status_code == 200


def test_code_looked_up_before_creation_is_found_after(client, admin_headers, make_student, monkeypatch):
    from tutoring.crud import people

    monkeypatch.setattr(people, "generate_student_code", lambda: "424242")
    assert client.get("/api/students/by-code/424242", headers=admin_headers).status_code == 404
    assert client.post("/api/attendance/scan", json={"code": "424242"}, headers=admin_headers).status_code == 404

    student = make_student()
    assert student["code"] == "424242"
    response = client.get("/api/students/by-code/424242", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["id"] == student["id"]
    assert client.post("/api/attendance/scan", json={"code": "424242"}, headers=admin_headers).status_code == 200
