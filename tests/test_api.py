from __future__ import annotations


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_protected_routes_need_login(client):
    resp = client.get("/api/attendance")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_and_me(client, login):
    resp = login()

    assert resp.status_code == 200
    assert resp.get_json()["user"]["username"] == "admin"
    assert "password" not in resp.get_json()["user"]
    assert client.get("/api/me").get_json()["role"] == "admin"


def test_bad_login_returns_401(login):
    resp = login("admin", "wrong")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid credentials"}


def test_record_and_report(client, login):
    login("employee1", "emp123")

    created = client.post("/api/attendance", json={"action": "sign-in"})
    assert created.status_code == 201
    assert created.get_json()["username"] == "employee1"
    assert created.get_json()["location"] == "Office"

    client.post("/api/attendance", json={"action": "sign-out", "location": "Remote"})

    report = client.get("/api/reports/daily").get_json()
    assert report["totalRecords"] == 2
    assert report["signIns"] == 1
    assert report["signOuts"] == 1

    feed = client.get("/api/attendance/feed").get_json()
    assert [e["action"] for e in feed] == ["sign-out", "sign-in"]


def test_invalid_action_returns_400(client, login):
    login()

    resp = client.post("/api/attendance", json={"action": "coffee"})

    assert resp.status_code == 400
    assert "Invalid action" in resp.get_json()["message"]


def test_invalid_window_returns_400(client, login):
    login()

    assert client.get("/api/reports/yearly").status_code == 400
    assert client.get("/api/reports/custom?start=2024-01-01").status_code == 400


def test_report_csv(client, login):
    login()
    client.post("/api/attendance", json={"action": "sign-in"})

    resp = client.get("/api/reports/weekly/csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.headers["Content-Disposition"].startswith("attachment; filename=attendance_weekly_")
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "id,userId,username,action,timestamp,location"
    assert len(lines) == 2


def test_analytics_endpoints(client, login):
    login()
    client.post("/api/attendance", json={"action": "sign-in"})

    attendance = client.get("/api/analytics/attendance").get_json()
    assert attendance["type"] == "attendance"
    assert attendance["totalRecords"] == 1
    assert attendance["userActivity"] == {"admin": {"signIns": 1, "signOuts": 0}}

    trends = client.get("/api/analytics/trends?days=5").get_json()
    assert len(trends["series"]) == 5

    assert client.get("/api/analytics/payroll").status_code == 400


def test_my_anomalies(client, login):
    login("employee1", "emp123")

    anomalies = client.get("/api/anomalies/me").get_json()

    assert [a["type"] for a in anomalies] == ["low_attendance"]


def test_register_then_login(client, login):
    resp = client.post(
        "/api/register",
        json={"username": "new_hire", "email": "new@company.com", "password": "secret1"},
    )
    assert resp.status_code == 201

    dup = client.post("/api/register", json={"username": "new_hire", "email": "x@company.com", "password": "secret1"})
    assert dup.status_code == 400
    assert dup.get_json()["message"] == "User already exists"

    assert login("new_hire", "secret1").status_code == 200


def test_tasks(client, login):
    login("supervisor1", "super123")

    created = client.post("/api/tasks", json={"title": "Check badges", "assignedTo": 3, "priority": "urgent"})
    assert created.status_code == 201
    assert created.get_json()["assignedBy"] == 2

    assert client.post("/api/tasks", json={"title": "Check badges", "assignedTo": 42}).status_code == 400
    assert [t["title"] for t in client.get("/api/tasks").get_json()] == ["Check badges"]


def test_admin_only_routes(client, login):
    login("employee1", "emp123")

    assert client.get("/api/backups").status_code == 403
    assert client.get("/api/logs").status_code == 403


def test_backup_and_restore_via_api(client, login):
    login()
    client.post("/api/attendance", json={"action": "sign-in"})

    created = client.post("/api/backups")
    assert created.status_code == 201
    filename = created.get_json()["filename"]
    assert client.get("/api/backups").get_json() == [filename]

    client.post("/api/attendance", json={"action": "sign-out"})
    assert client.get("/api/analytics/attendance").get_json()["totalRecords"] == 2

    restored = client.post(f"/api/backups/{filename}/restore")
    assert restored.status_code == 200
    assert client.get("/api/analytics/attendance").get_json()["totalRecords"] == 1

    assert client.post("/api/backups/backup-nope.json/restore").status_code == 400


def test_activity_log_records_logins(client, login):
    login()

    logs = client.get("/api/logs").get_json()

    assert logs[0]["type"] == "login"
    assert logs[0]["description"] == "User admin logged in"


def test_devices_list_is_empty_by_default(client, login):
    login()

    assert client.get("/api/devices").get_json() == []


def test_trend_days_above_the_cap_returns_400(client, login):
    login()

    resp = client.get("/api/analytics/trends?days=1000000")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "days must not exceed 366"


def test_zero_cache_ttl_shows_new_events_immediately(make_app):
    client = make_app(ANALYTICS_CACHE_TTL_SECONDS=0, EXPECTED_USER_COUNT=2).test_client()
    client.post("/api/login", json={"username": "admin", "password": "admin123"})

    client.post("/api/attendance", json={"action": "sign-in"})
    assert client.get("/api/analytics/attendance").get_json()["totalRecords"] == 1

    client.post("/api/attendance", json={"action": "sign-out"})
    assert client.get("/api/analytics/attendance").get_json()["totalRecords"] == 2

    productivity = client.get("/api/analytics/productivity").get_json()
    assert productivity["expectedUserCount"] == 2
    assert productivity["attendanceRate"] == 50


def test_search_attendance(client, login):
    login("employee1", "emp123")
    client.post("/api/attendance", json={"action": "sign-in", "location": "Remote"})
    client.post("/api/attendance", json={"action": "sign-out"})

    resp = client.post(
        "/api/attendance/search",
        json={"criteria": [{"field": "location", "operator": "eq", "value": "Remote"}]},
    )

    assert resp.status_code == 200
    assert [e["action"] for e in resp.get_json()] == ["sign-in"]

    bad = client.post("/api/attendance/search", json={"criteria": [{"field": "action", "operator": "like", "value": "x"}]})
    assert bad.status_code == 400
