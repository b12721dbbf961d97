from datetime import datetime

from jobboard.api.routes.admin_routes import add_months, growth_rate, start_of_month
from jobboard.core.enums import JobStatus, Role
from jobboard.db.database import get_db_session
from jobboard.db.models import User

NEW_STAFF = {
    "firstname": "Hana",
    "lastname": "Recruiter",
    "email": "hana@example.com",
    "password": "password123",
    "gender": "female",
    "role": "HR",
    "autoVerify": True,
}


def test_month_helpers():
    assert start_of_month(datetime(2025, 3, 17, 10, 30)) == datetime(2025, 3, 1)
    assert add_months(datetime(2025, 1, 1), -1) == datetime(2024, 12, 1)
    assert add_months(datetime(2025, 11, 1), 3) == datetime(2026, 2, 1)
    assert add_months(datetime(2025, 5, 1), -7) == datetime(2024, 10, 1)


def test_growth_rate():
    assert growth_rate(5, 0) is None
    assert growth_rate(15, 10) == 50.0
    assert growth_rate(5, 10) == -50.0


def test_only_admin_manages_users(client, make_user, auth_headers):
    hr = auth_headers(make_user(role=Role.HR))
    applicant = auth_headers(make_user())

    assert client.get("/api/admin/users", headers=hr).status_code == 401
    assert client.post("/api/admin/users", headers=hr, json=NEW_STAFF).status_code == 401
    assert client.get("/api/admin/users", headers=applicant).status_code == 401


def test_create_and_list_staff(client, make_user, auth_headers):
    admin = auth_headers(make_user(role=Role.ADMIN, email="root@example.com"))
    make_user()  # applicants are never listed

    created = client.post("/api/admin/users", headers=admin, json=NEW_STAFF)
    assert created.status_code == 201
    new_id = created.json()["data"]["id"]

    login = client.post("/api/auth/login", json={"email": "hana@example.com", "password": "password123"})
    assert login.status_code == 200

    body = client.get("/api/admin/users", headers=admin).json()
    emails = sorted(u["email"] for u in body["data"])
    assert emails == ["hana@example.com", "root@example.com"]
    assert body["meta"]["paging"]["total"] == 2

    hana = next(u for u in body["data"] if u["id"] == new_id)
    assert hana["name"] == "Hana Recruiter"
    assert hana["statusLabel"] == "Active"

    searched = client.get("/api/admin/users", headers=admin, params={"q": "hana"}).json()["data"]
    assert [u["id"] for u in searched] == [new_id]


def test_create_rejects_duplicates_and_applicant_role(client, make_user, auth_headers):
    admin = auth_headers(make_user(role=Role.ADMIN))
    make_user(email="hana@example.com")

    duplicate = client.post("/api/admin/users", headers=admin, json=NEW_STAFF)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["message"] == "Email already exists"

    applicant_role = client.post(
        "/api/admin/users", headers=admin, json=dict(NEW_STAFF, email="x@example.com", role="APPLICANT")
    )
    assert applicant_role.status_code == 400
    assert "role" in applicant_role.json()["error"]["details"]["fieldErrors"]


def test_update_and_suspend_staff(client, make_user, auth_headers):
    admin = auth_headers(make_user(role=Role.ADMIN))
    hr = make_user(role=Role.HR, email="hr@example.com")

    response = client.patch(
        f"/api/admin/users/{hr['id']}",
        headers=admin,
        json={"isSuspended": True, "password": "rotated123"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["statusLabel"] == "Suspended"

    with get_db_session() as db:
        assert db.get(User, hr["id"]).password != "rotated123"

    suspended = client.get("/api/admin/users", headers=admin, params={"status": "SUSPENDED"}).json()["data"]
    assert [u["id"] for u in suspended] == [hr["id"]]

    assert client.patch("/api/admin/users/nope", headers=admin, json={"firstname": "X"}).status_code == 404


def test_delete_is_soft(client, make_user, auth_headers):
    admin = auth_headers(make_user(role=Role.ADMIN))
    hr = make_user(role=Role.HR, email="hr@example.com")
    hr_headers = auth_headers(hr)

    assert client.delete(f"/api/admin/users/{hr['id']}", headers=admin).status_code == 200

    with get_db_session() as db:
        row = db.get(User, hr["id"])
        assert row is not None
        assert row.deleted_at is not None
        assert row.is_suspended is True

    assert client.get("/api/auth/me", headers=hr_headers).status_code == 401
    listed = client.get("/api/admin/users", headers=admin).json()["data"]
    assert hr["id"] not in [u["id"] for u in listed]


def test_dashboard(client, make_user, make_category, make_job, auth_headers):
    category = make_category()
    job_id = make_job(category["id"], title="Backend Developer")
    make_job(category["id"], title="Closed Role", status=JobStatus.CLOSED)
    applicant = make_user(firstname="Ana", lastname="Reyes")
    client.post(
        f"/api/jobs/{job_id}/apply",
        headers=auth_headers(applicant),
        json={"coverLetter": "I would love to join the backend team."},
    )
    hr = auth_headers(make_user(role=Role.HR))

    response = client.get("/api/admin/dashboard", headers=hr)
    assert response.status_code == 200
    data = response.json()["data"]

    assert data["stats"]["totalJobs"] == 2
    assert data["stats"]["totalApplicants"] == 1
    assert data["stats"]["totalUsers"] == 2
    assert len(data["usageTrend"]) == 8
    assert data["usageTrend"][-1]["users"] == 1
    assert data["usageTrend"][-1]["jobs"] == 2
    assert data["topJobs"] == [{"name": "Backend Developer", "value": 1}]
    assert "New applicant registered: Ana Reyes" in data["recentActivity"]
    summary = {row["label"]: row["value"] for row in data["systemSummary"]}
    assert summary["Open Jobs"] == 1
    assert summary["Closed Jobs"] == 1


def test_dashboard_is_staff_only(client, make_user, auth_headers):
    response = client.get("/api/admin/dashboard", headers=auth_headers(make_user()))
    assert response.status_code == 403
