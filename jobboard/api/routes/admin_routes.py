"""
Admin Routes

GET /admin/dashboard - Platform statistics (ADMIN or HR)
GET /admin/users - List ADMIN and HR accounts (ADMIN only)
POST /admin/users - Create an ADMIN or HR account (ADMIN only)
PATCH /admin/users/{user_id} - Update an account (ADMIN only)
DELETE /admin/users/{user_id} - Soft delete and suspend an account (ADMIN only)
"""

from datetime import datetime, timedelta
from typing import Optional

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from jobboard.core.auth import CurrentUser, hash_password, require_admin, require_staff
from jobboard.core.enums import JobStatus, Role
from jobboard.core.errors import ConflictError, NotFoundError
from jobboard.core.http import ok
from jobboard.core.pagination import fetch_offset_page, offset_meta, read_offset_params
from jobboard.db.database import get_db_session
from jobboard.db.models import Job, User, utcnow
from jobboard.schemas.schemas import AdminUserCreate, AdminUserResponse, AdminUserUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
TREND_MONTHS = 8


def start_of_month(d: datetime) -> datetime:
    return datetime(d.year, d.month, 1)


def add_months(d: datetime, diff: int) -> datetime:
    """First day of the month ``diff`` months away from ``d``."""
    index = d.year * 12 + (d.month - 1) + diff
    return datetime(index // 12, index % 12 + 1, 1)


def _count(db, column, *where) -> int:
    return db.scalar(select(func.count(column)).where(*where))


def growth_rate(this_month: int, last_month: int) -> Optional[float]:
    """Percent change month over month; None when last month had no signups."""
    if last_month <= 0:
        return None
    return (this_month - last_month) / last_month * 100


# ============================================================
# DASHBOARD
# ============================================================

@router.get("/dashboard")
async def dashboard(staff: CurrentUser = Depends(require_staff)):
    now = utcnow()
    this_month = start_of_month(now)
    last_month = add_months(this_month, -1)
    trend_start = add_months(this_month, -(TREND_MONTHS - 1))
    thirty_days_ago = now - timedelta(days=30)

    active_user = User.deleted_at.is_(None)
    applicant = (User.role == Role.APPLICANT) & active_user
    active_job = Job.deleted_at.is_(None)

    with get_db_session() as db:
        total_users = _count(db, User.id, active_user)
        total_jobs = _count(db, Job.id, active_job)
        total_applicants = _count(db, User.id, applicant)
        applicants_this_month = _count(db, User.id, applicant, User.created_at >= this_month)
        applicants_last_month = _count(
            db, User.id, applicant, User.created_at >= last_month, User.created_at < this_month
        )
        jobs_by_status = {
            status: _count(db, Job.id, active_job, Job.status == status) for status in JobStatus
        }
        new_applicants_30d = _count(db, User.id, applicant, User.created_at >= thirty_days_ago)

        user_dates = db.scalars(
            select(User.created_at).where(applicant, User.created_at >= trend_start)
        ).all()
        job_dates = db.scalars(
            select(Job.created_at).where(active_job, Job.created_at >= trend_start)
        ).all()

        top_jobs = db.execute(
            select(Job.title, Job.applications_count)
            .where(active_job)
            .order_by(Job.applications_count.desc(), Job.id.asc())
            .limit(8)
        ).all()

        recent_users = db.execute(
            select(User.firstname, User.lastname, User.created_at)
            .where(applicant)
            .order_by(User.created_at.desc())
            .limit(5)
        ).all()
        recent_jobs = db.execute(
            select(Job.title, Job.company, Job.created_at)
            .where(active_job)
            .order_by(Job.created_at.desc())
            .limit(5)
        ).all()

    user_buckets = {}
    for created in user_dates:
        key = (created.year, created.month)
        user_buckets[key] = user_buckets.get(key, 0) + 1
    job_buckets = {}
    for created in job_dates:
        key = (created.year, created.month)
        job_buckets[key] = job_buckets.get(key, 0) + 1

    usage_trend = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        month = add_months(this_month, -offset)
        key = (month.year, month.month)
        usage_trend.append({
            "label": MONTH_LABELS[month.month - 1],
            "users": user_buckets.get(key, 0),
            "jobs": job_buckets.get(key, 0),
        })

    activities = [
        (created, f"New job posted: {title} at {company}") for title, company, created in recent_jobs
    ] + [
        (created, f"New applicant registered: {first} {last}") for first, last, created in recent_users
    ]
    activities.sort(key=lambda a: a[0], reverse=True)

    return ok({
        "stats": {
            "totalUsers": total_users,
            "totalJobs": total_jobs,
            "totalApplicants": total_applicants,
            "growthRate": growth_rate(applicants_this_month, applicants_last_month),
        },
        "usageTrend": usage_trend,
        "topJobs": [{"name": title, "value": count} for title, count in top_jobs if count > 0],
        "recentActivity": [text for _, text in activities[:8]],
        "systemSummary": [
            {"label": "Open Jobs", "value": jobs_by_status[JobStatus.OPEN]},
            {"label": "Closed Jobs", "value": jobs_by_status[JobStatus.CLOSED]},
            {"label": "Filled Jobs", "value": jobs_by_status[JobStatus.FILLED]},
            {"label": "New Applicants (30 days)", "value": new_applicants_30d},
        ],
    })


# ============================================================
# USER MANAGEMENT
# ============================================================

@router.get("/users")
async def list_staff_users(
    q: Optional[str] = None,
    status: Optional[str] = None,
    limit: Optional[str] = None,
    page: Optional[str] = None,
    admin: CurrentUser = Depends(require_admin),
):
    stmt = select(User).where(User.deleted_at.is_(None), User.role.in_([Role.ADMIN, Role.HR]))
    if status == "ACTIVE":
        stmt = stmt.where(User.is_suspended.is_(False))
    elif status == "SUSPENDED":
        stmt = stmt.where(User.is_suspended.is_(True))
    term = (q or "").strip()
    if term:
        stmt = stmt.where(
            or_(
                User.firstname.icontains(term, autoescape=True),
                User.lastname.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
            )
        )

    params = read_offset_params(limit, page)
    with get_db_session() as db:
        rows, total = fetch_offset_page(db, stmt, User, User.created_at, "desc", params)
        items = [AdminUserResponse.model_validate(u) for u in rows]
    return ok(items, offset_meta(params.limit, "createdAt", "desc", params.page, total))


@router.post("/users", status_code=201)
async def create_staff_user(data: AdminUserCreate, admin: CurrentUser = Depends(require_admin)):
    try:
        with get_db_session() as db:
            if db.scalar(select(User.id).where(User.email == data.email)):
                raise ConflictError("Email already exists")
            user = User(
                firstname=data.firstname,
                lastname=data.lastname,
                email=data.email,
                password=hash_password(data.password),
                gender=data.gender,
                role=data.role,
                is_suspended=False,
                email_verified=utcnow() if data.auto_verify else None,
            )
            db.add(user)
            db.flush()
            user_id = user.id
    except IntegrityError:
        raise ConflictError("Email already exists")

    logger.info("staff_user_created", user_id=user_id, role=data.role.value, by=admin.id)
    return ok({"id": user_id, "message": "User created successfully."})


@router.patch("/users/{user_id}")
async def update_staff_user(
    user_id: str, data: AdminUserUpdate, admin: CurrentUser = Depends(require_admin)
):
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    try:
        with get_db_session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            for field, value in changes.items():
                setattr(user, field, value)
            db.flush()
            updated = AdminUserResponse.model_validate(user)
    except IntegrityError:
        raise ConflictError("Email already exists")

    return ok(updated)


@router.delete("/users/{user_id}")
async def delete_staff_user(user_id: str, admin: CurrentUser = Depends(require_admin)):
    with get_db_session() as db:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.deleted_at = utcnow()
        user.is_suspended = True

    logger.info("staff_user_deleted", user_id=user_id, by=admin.id)
    return ok({"id": user_id})
