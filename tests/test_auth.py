import inspect
import re
from datetime import timedelta

from jobboard.api.routes import auth_routes
from jobboard.core.auth import create_access_token
from jobboard.core.enums import Role
from jobboard.db.database import get_db_session
from jobboard.db.models import EmailVerificationToken, Profile, User, utcnow

DEFAULT_PASSWORD = "password123"

SIGNUP = {
    "firstname": "Maria",
    "lastname": "Santos",
    "email": "maria@example.com",
    "password": "password123",
    "confirmPassword": "password123",
}


def _token_from(mail):
    match = re.search(r"token=([0-9a-f]+)", mail["html"])
    assert match, "verification link should carry the token"
    return match.group(1)


def test_signup_creates_applicant_profile_and_sends_email(client, mailer):
    response = client.post("/api/auth/signup", json=SIGNUP)
    assert response.status_code == 201
    body = response.json()
    assert body["ok"] is True
    assert body["data"]["email"] == "maria@example.com"
    assert body["data"]["role"] == "APPLICANT"
    assert "password" not in body["data"]

    assert len(mailer.sent) == 1
    assert mailer.sent[0]["to"] == "maria@example.com"

    with get_db_session() as db:
        user = db.get(User, body["data"]["id"])
        assert user.email_verified is None
        assert user.password != "password123"
        assert db.query(Profile).filter_by(user_id=user.id).count() == 1


def test_mail_sending_handlers_are_sync():
    # blocking mailer calls must run in the threadpool, not on the event loop
    assert not inspect.iscoroutinefunction(auth_routes.signup)
    assert not inspect.iscoroutinefunction(auth_routes.resend_verification)


def test_signup_rejects_mismatched_passwords(client, mailer):
    payload = dict(SIGNUP, confirmPassword="different123")
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"
    assert mailer.sent == []


def test_signup_duplicate_email_conflicts(client, make_user):
    make_user(email="maria@example.com")
    response = client.post("/api/auth/signup", json=SIGNUP)
    assert response.status_code == 409
    assert response.json()["error"] == {"code": "CONFLICT", "message": "This user already exists"}


def test_signup_cannot_create_staff(client):
    response = client.post("/api/auth/signup", json=dict(SIGNUP, role="ADMIN"))
    assert response.status_code == 400


def test_signup_reports_email_failure(client, mailer):
    mailer.fail = True
    response = client.post("/api/auth/signup", json=SIGNUP)
    assert response.status_code == 400
    assert "rejected" in response.json()["error"]["message"]


def test_verify_then_login(client, mailer):
    client.post("/api/auth/signup", json=SIGNUP)
    token = _token_from(mailer.sent[0])

    blocked = client.post("/api/auth/login", json={"email": SIGNUP["email"], "password": "password123"})
    assert blocked.status_code == 403

    verified = client.post("/api/auth/verify-email", json={"token": token})
    assert verified.status_code == 200
    assert verified.json() == {"ok": True, "data": None, "meta": None}

    # token is single use
    again = client.post("/api/auth/verify-email", json={"token": token})
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Token is invalid or expired"

    response = client.post("/api/auth/login", json={"email": SIGNUP["email"], "password": "password123"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["role"] == "APPLICANT"
    assert data["user"]["profileCompleted"] is False

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == SIGNUP["email"]


def test_expired_token_is_rejected(client, mailer):
    client.post("/api/auth/signup", json=SIGNUP)
    token = _token_from(mailer.sent[0])
    with get_db_session() as db:
        record = db.query(EmailVerificationToken).one()
        record.expires = utcnow() - timedelta(minutes=1)

    response = client.post("/api/auth/verify-email", json={"token": token})
    assert response.status_code == 400


def test_resend_verification(client, mailer, make_user):
    client.post("/api/auth/signup", json=SIGNUP)
    old_token = _token_from(mailer.sent[0])

    response = client.post("/api/auth/resend-verification", json={"email": SIGNUP["email"]})
    assert response.status_code == 200
    new_token = _token_from(mailer.sent[1])
    assert new_token != old_token

    assert client.post("/api/auth/verify-email", json={"token": old_token}).status_code == 400
    assert client.post("/api/auth/verify-email", json={"token": new_token}).status_code == 200

    done = client.post("/api/auth/resend-verification", json={"email": SIGNUP["email"]})
    assert done.status_code == 400
    assert done.json()["error"]["message"] == "Email already verified"

    missing = client.post("/api/auth/resend-verification", json={"email": "nobody@example.com"})
    assert missing.status_code == 404


def test_login_failures(client, make_user):
    make_user(email="ok@example.com")
    make_user(email="suspended@example.com", suspended=True)
    make_user(email="gone@example.com", deleted=True)

    wrong = client.post("/api/auth/login", json={"email": "ok@example.com", "password": "nope"})
    assert wrong.status_code == 401

    unknown = client.post("/api/auth/login", json={"email": "who@example.com", "password": DEFAULT_PASSWORD})
    assert unknown.status_code == 401

    suspended = client.post("/api/auth/login", json={"email": "suspended@example.com", "password": DEFAULT_PASSWORD})
    assert suspended.status_code == 403

    deleted = client.post("/api/auth/login", json={"email": "gone@example.com", "password": DEFAULT_PASSWORD})
    assert deleted.status_code == 401


def test_me_requires_valid_token(client, make_user, auth_headers):
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "UNAUTHORIZED"

    expired = create_access_token({"sub": "x", "role": "APPLICANT"}, expires_delta=timedelta(minutes=-5))
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401


def test_suspension_takes_effect_immediately(client, make_user, auth_headers):
    user = make_user(role=Role.HR)
    headers = auth_headers(user)
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    with get_db_session() as db:
        db.get(User, user["id"]).is_suspended = True

    assert client.get("/api/auth/me", headers=headers).status_code == 403
