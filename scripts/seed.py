#!/usr/bin/env python3
"""
Demo Data Seeder

Creates categories, skill tags, one account per role and a few open jobs.
Safe to re-run: nothing is inserted when the admin account already exists.

Run: python scripts/seed.py
Demo password for every account: password123
"""
import sys

import structlog
from sqlalchemy import select

from jobboard.core.auth import hash_password
from jobboard.core.enums import Role
from jobboard.core.logging import configure_logging
from jobboard.db.database import get_db_session, init_db
from jobboard.db.models import Category, Job, JobSkillTag, Profile, SkillTag, User, utcnow

logger = structlog.get_logger("seed")

DEMO_PASSWORD = "password123"

CATEGORIES = {
    "Engineering": ["Python", "PostgreSQL", "React", "Docker"],
    "Design": ["Figma", "Illustration", "UX Research"],
    "Operations": ["Excel", "Scheduling", "Procurement"],
}

JOBS = [
    ("Backend Developer", "Engineering", "Acme Corp", "Manila", 2, 80000, ["Python", "PostgreSQL"]),
    ("Frontend Developer", "Engineering", "Acme Corp", "Remote", 1, 75000, ["React"]),
    ("Product Designer", "Design", "Brightside Studio", "Cebu", 1, 60000, ["Figma", "UX Research"]),
    ("Operations Associate", "Operations", "Northwind", "Davao", 3, 35000, ["Excel", "Scheduling"]),
]

ACCOUNTS = [
    ("Ada", "Admin", "admin@example.com", Role.ADMIN),
    ("Hana", "Recruiter", "hr@example.com", Role.HR),
    ("Alex", "Applicant", "applicant@example.com", Role.APPLICANT),
]


def main() -> int:
    configure_logging()
    init_db()

    with get_db_session() as db:
        if db.scalar(select(User.id).where(User.email == ACCOUNTS[0][2])):
            logger.info("seed_skipped", reason="admin account exists")
            return 0

        password = hash_password(DEMO_PASSWORD)
        users = {}
        for firstname, lastname, email, role in ACCOUNTS:
            user = User(
                firstname=firstname,
                lastname=lastname,
                email=email,
                role=role,
                gender="unspecified",
                password=password,
                email_verified=utcnow(),
            )
            db.add(user)
            users[role] = user
        db.flush()
        db.add(Profile(user_id=users[Role.APPLICANT].id))

        skills = {}
        categories = {}
        for category_name, skill_names in CATEGORIES.items():
            category = Category(name=category_name)
            db.add(category)
            db.flush()
            categories[category_name] = category
            for skill_name in skill_names:
                skill = SkillTag(name=skill_name, category_id=category.id)
                db.add(skill)
                skills[skill_name] = skill
        db.flush()

        for title, category_name, company, location, manpower, salary, skill_names in JOBS:
            job = Job(
                title=title,
                description=f"{company} is hiring a {title} to join the team in {location}.",
                company=company,
                location=location,
                manpower=manpower,
                salary=salary,
                category_id=categories[category_name].id,
                posted_by_id=users[Role.HR].id,
            )
            db.add(job)
            db.flush()
            for skill_name in skill_names:
                db.add(JobSkillTag(job_id=job.id, skill_tag_id=skills[skill_name].id))

    logger.info("seed_complete", users=len(ACCOUNTS), categories=len(CATEGORIES), jobs=len(JOBS))
    return 0


if __name__ == "__main__":
    sys.exit(main())
