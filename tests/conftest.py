"""
Shared fixtures: in-memory SQLite schema per test, a recording mailer and
small factories for users, categories, skills and jobs.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from jobboard.core.auth import create_access_token, hash_password
from jobboard.core.enums import JobStatus, Role
from jobboard.core.errors import EmailDeliveryError
from jobboard.db.database import engine, get_db_session
from jobboard.db.models import Base, Category, Job, JobSkillTag, Profile, SkillTag, User, utcnow
from jobboard.main import app
from jobboard.services.email_service import get_mailer

DEFAULT_PASSWORD = "password123"

# Hashing is slow; every factory user shares one hash
_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


class RecordingMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, html):
        if self.fail:
            raise EmailDeliveryError("Email provider rejected the message (422)")
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mailer():
    fake = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def client(mailer):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(role=Role.APPLICANT, email=None, verified=True, suspended=False,
              deleted=False, with_profile=None, firstname="Test", lastname="User"):
        counter["n"] += 1
        if with_profile is None:
            with_profile = role is Role.APPLICANT
        with get_db_session() as db:
            user = User(
                firstname=firstname,
                lastname=lastname,
                email=email or f"user{counter['n']}@example.com",
                role=role,
                gender="male",
                password=_PASSWORD_HASH,
                email_verified=utcnow() if verified else None,
                is_suspended=suspended,
                deleted_at=utcnow() if deleted else None,
            )
            db.add(user)
            db.flush()
            profile_id = None
            if with_profile:
                profile = Profile(user_id=user.id)
                db.add(profile)
                db.flush()
                profile_id = profile.id
            return {"id": user.id, "email": user.email, "role": role, "profile_id": profile_id}

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token(data={"sub": user["id"], "role": user["role"].value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_category():
    def _make(name="Engineering", skills=()):
        with get_db_session() as db:
            category = Category(name=name)
            db.add(category)
            db.flush()
            skill_ids = []
            for skill_name in skills:
                skill = SkillTag(name=skill_name, category_id=category.id)
                db.add(skill)
                db.flush()
                skill_ids.append(skill.id)
            return {"id": category.id, "skill_ids": skill_ids}

    return _make


@pytest.fixture
def make_job():
    def _make(category_id, title="Backend Developer", salary=50000, manpower=1,
              status=JobStatus.OPEN, archived=False, created_at=None, skill_ids=()):
        with get_db_session() as db:
            job = Job(
                title=title,
                description="A role building and running web services.",
                company="Acme Corp",
                location="Manila",
                manpower=manpower,
                salary=salary,
                status=status,
                category_id=category_id,
                deleted_at=utcnow() if archived else None,
            )
            if created_at is not None:
                job.created_at = created_at
            db.add(job)
            db.flush()
            for skill_id in skill_ids:
                db.add(JobSkillTag(job_id=job.id, skill_tag_id=skill_id))
            return job.id

    return _make
