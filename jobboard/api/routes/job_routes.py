"""
Job Routes

GET /jobs - List active jobs with filters (cursor paging by createdAt, offset otherwise)
POST /jobs - Create job posting (staff only)
GET /jobs/feed - Recommended open jobs for the caller (cursor paging by createdAt)
GET /jobs/{job_id} - Get job details with skills and applications
PATCH /jobs/{job_id} - Update or archive job (staff only)
DELETE /jobs/{job_id} - Delete job (staff only)
GET /jobs/{job_id}/apply - Get own application for the job
POST /jobs/{job_id}/apply - Apply to job (applicant only)
GET /archived-jobs - List archived jobs
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from jobboard.core.auth import CurrentUser, get_current_user, require_applicant, require_staff
from jobboard.core.enums import JobStatus
from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.core.http import ok
from jobboard.core.pagination import (
    cursor_meta,
    fetch_cursor_page,
    fetch_offset_page,
    offset_meta,
    read_offset_params,
    read_pagination_params,
    read_sort,
)
from jobboard.db.database import get_db_session
from jobboard.db.models import (
    ApplicantSkillTag,
    Application,
    Category,
    Job,
    JobSkillTag,
    Profile,
    SkillTag,
)
from jobboard.schemas.schemas import (
    ApplyRequest,
    JobCreate,
    JobDetail,
    JobListItem,
    JobResponse,
    JobUpdate,
    MyApplication,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
archived_router = APIRouter(prefix="/archived-jobs", tags=["Jobs"])

JOB_SORT_COLUMNS = {
    "title": Job.title,
    "salary": Job.salary,
    "manpower": Job.manpower,
    "applications": Job.applications_count,
    "createdAt": Job.created_at,
}

ARCHIVED_SORT_COLUMNS = {
    "title": Job.title,
    "salary": Job.salary,
    "applications": Job.applications_count,
    "createdAt": Job.created_at,
}


def _job_filters(q: Optional[str], category_id: Optional[str], status: Optional[str]) -> List:
    """Shared WHERE clauses; unknown status values are ignored."""
    filters = []
    if category_id and category_id.strip():
        filters.append(Job.category_id == category_id.strip())
    if status in JobStatus.__members__:
        filters.append(Job.status == JobStatus(status))
    term = (q or "").strip()
    if term:
        filters.append(
            Job.title.icontains(term, autoescape=True)
            | Job.description.icontains(term, autoescape=True)
            | Job.company.icontains(term, autoescape=True)
            | Job.location.icontains(term, autoescape=True)
        )
    return filters


def _job_list_stmt(*filters):
    return (
        select(Job)
        .where(*filters)
        .options(selectinload(Job.category), selectinload(Job.skill_tags))
    )


def _validate_skill_ids(db, skill_ids: List[str]) -> List[str]:
    unique_ids = list(dict.fromkeys(skill_ids))
    if not unique_ids:
        return []
    known = set(db.scalars(select(SkillTag.id).where(SkillTag.id.in_(unique_ids))).all())
    if len(known) != len(unique_ids):
        raise BadRequestError("One or more skill ids are invalid.")
    return unique_ids


def _recommended_filters(db, user_id: str) -> List:
    """
    Open, non-archived jobs matching the caller's skills or preferred
    categories, minus jobs they already applied to.

    Preferred categories come from the caller's skills and from the jobs
    they applied to. A caller with no preferences sees every open job.
    """
    skill_rows = db.execute(
        select(ApplicantSkillTag.skill_id, SkillTag.category_id)
        .join(SkillTag, SkillTag.id == ApplicantSkillTag.skill_id)
        .join(Profile, Profile.id == ApplicantSkillTag.profile_id)
        .where(Profile.user_id == user_id)
    ).all()
    applied_rows = db.execute(
        select(Application.job_id, Job.category_id)
        .join(Job, Job.id == Application.job_id)
        .where(Application.applicant_id == user_id)
    ).all()

    skill_ids = [skill_id for skill_id, _ in skill_rows]
    category_ids = {c for _, c in skill_rows if c} | {c for _, c in applied_rows if c}
    applied_job_ids = [job_id for job_id, _ in applied_rows]

    filters = [Job.deleted_at.is_(None), Job.status == JobStatus.OPEN]
    matches = []
    if skill_ids:
        matches.append(Job.skills.any(JobSkillTag.skill_tag_id.in_(skill_ids)))
    if category_ids:
        matches.append(Job.category_id.in_(category_ids))
    if matches:
        filters.append(or_(*matches))
    if applied_job_ids:
        filters.append(Job.id.not_in(applied_job_ids))
    return filters


@router.get("")
async def list_jobs(
    q: Optional[str] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    status: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_dir: Optional[str] = Query(None, alias="sortDir"),
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    page: Optional[str] = None,
):
    """
    List active (non-archived) jobs.

    sortBy=createdAt pages by cursor; every other sort key pages by offset.
    """
    key, direction = read_sort(sort_by, sort_dir, JOB_SORT_COLUMNS, "createdAt")
    stmt = _job_list_stmt(Job.deleted_at.is_(None), *_job_filters(q, category_id, status))

    with get_db_session() as db:
        if key == "createdAt":
            params = read_pagination_params(limit, cursor)
            rows, next_cursor = fetch_cursor_page(db, stmt, Job, Job.created_at, direction, params)
            items = [JobListItem.model_validate(j) for j in rows]
            return ok(items, cursor_meta(params.limit, key, direction, next_cursor))

        params = read_offset_params(limit, page)
        rows, total = fetch_offset_page(db, stmt, Job, JOB_SORT_COLUMNS[key], direction, params)
        items = [JobListItem.model_validate(j) for j in rows]
        return ok(items, offset_meta(params.limit, key, direction, params.page, total))


@router.post("", status_code=201)
async def create_job(data: JobCreate, staff: CurrentUser = Depends(require_staff)):
    """Create a job and its skill links in one transaction."""
    with get_db_session() as db:
        if db.get(Category, data.category_id) is None:
            raise BadRequestError("Invalid categoryId")

        fields = data.model_dump(exclude={"skills", "status"})
        job = Job(**fields, status=data.status or JobStatus.OPEN, posted_by_id=staff.id)
        db.add(job)
        db.flush()

        for skill_id in _validate_skill_ids(db, data.skills or []):
            db.add(JobSkillTag(job_id=job.id, skill_tag_id=skill_id))
        db.flush()

        created = JobResponse.model_validate(job)

    logger.info("job_created", job_id=created.id, by=staff.id)
    return ok(created)


@router.get("/feed")
async def recommended_jobs(
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    user: CurrentUser = Depends(get_current_user),
):
    """Recommended jobs for the caller, newest first, cursor paged."""
    params = read_pagination_params(limit, cursor)
    with get_db_session() as db:
        stmt = _job_list_stmt(*_recommended_filters(db, user.id))
        rows, next_cursor = fetch_cursor_page(db, stmt, Job, Job.created_at, "desc", params)
        items = [JobListItem.model_validate(j) for j in rows]
        return ok(items, cursor_meta(params.limit, "createdAt", "desc", next_cursor))


@router.get("/{job_id}")
async def get_job(job_id: str):
    with get_db_session() as db:
        job = db.scalar(
            select(Job)
            .where(Job.id == job_id)
            .options(
                selectinload(Job.category),
                selectinload(Job.skill_tags),
                selectinload(Job.applications).selectinload(Application.applicant),
            )
        )
        if job is None:
            raise NotFoundError("Job not found")
        return ok(JobDetail.model_validate(job))


@router.patch("/{job_id}")
async def update_job(job_id: str, data: JobUpdate, staff: CurrentUser = Depends(require_staff)):
    """Partial update; sending deletedAt archives the job, null restores it."""
    changes = data.model_dump(exclude_unset=True)
    with get_db_session() as db:
        job = db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if changes.get("category_id") and db.get(Category, changes["category_id"]) is None:
            raise BadRequestError("Invalid categoryId")

        for field, value in changes.items():
            if value is None and field != "deleted_at":
                continue
            setattr(job, field, value)
        db.flush()
        return ok(JobResponse.model_validate(job))


@router.delete("/{job_id}")
async def delete_job(job_id: str, staff: CurrentUser = Depends(require_staff)):
    with get_db_session() as db:
        job = db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        db.delete(job)
    logger.info("job_deleted", job_id=job_id, by=staff.id)
    return ok({"id": job_id})


@router.get("/{job_id}/apply")
async def get_my_application(job_id: str, user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        application = db.scalar(
            select(Application).where(
                Application.job_id == job_id,
                Application.applicant_id == user.id,
                Application.deleted_at.is_(None),
            )
        )
        return ok(MyApplication.model_validate(application) if application else None)


@router.post("/{job_id}/apply")
async def apply_to_job(
    job_id: str, data: ApplyRequest, user: CurrentUser = Depends(require_applicant)
):
    """Submit an application. The form payload is stored as JSON."""
    with get_db_session() as db:
        job = db.get(Job, job_id)
        if job is None or job.deleted_at is not None:
            raise NotFoundError("Job not found.")
        if job.status is not JobStatus.OPEN:
            raise BadRequestError("This job is not open for applications.")

        existing = db.scalar(
            select(Application.id).where(
                Application.job_id == job.id, Application.applicant_id == user.id
            )
        )
        if existing:
            raise BadRequestError("You have already applied for this job.")

        application = Application(
            job_id=job.id,
            applicant_id=user.id,
            form_data=data.model_dump(by_alias=True, mode="json", exclude_none=True),
        )
        db.add(application)
        db.flush()
        created = MyApplication.model_validate(application)

    logger.info("application_submitted", application_id=created.id, job_id=job_id)
    return ok(created)


@archived_router.get("")
async def list_archived_jobs(
    q: Optional[str] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    status: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_dir: Optional[str] = Query(None, alias="sortDir"),
    limit: Optional[str] = None,
    page: Optional[str] = None,
):
    """Archived jobs (deletedAt set), always offset-paged."""
    key, direction = read_sort(sort_by, sort_dir, ARCHIVED_SORT_COLUMNS, "createdAt")
    stmt = _job_list_stmt(Job.deleted_at.is_not(None), *_job_filters(q, category_id, status))
    params = read_offset_params(limit, page)

    with get_db_session() as db:
        rows, total = fetch_offset_page(db, stmt, Job, ARCHIVED_SORT_COLUMNS[key], direction, params)
        items = [JobListItem.model_validate(j) for j in rows]
        return ok(items, offset_meta(params.limit, key, direction, params.page, total))
