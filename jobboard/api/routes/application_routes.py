"""
Application Routes (staff)

GET /applications - List applications (cursor paging by submittedAt, offset otherwise)
GET /applications/{application_id} - Application detail with form data
PATCH /applications/{application_id} - Update status and notify the applicant
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import contains_eager, selectinload

from jobboard.core.auth import CurrentUser, require_staff
from jobboard.core.enums import ApplicationStatus
from jobboard.core.errors import NotFoundError
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
from jobboard.db.models import Application, Job, User
from jobboard.schemas.schemas import (
    ApplicationDetail,
    ApplicationListItem,
    ApplicationStatusUpdate,
)
from jobboard.services.notifications import notify_status_change

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

APPLICATION_SORT_COLUMNS = {
    "applicant": (User.lastname, User.firstname),
    "email": User.email,
    "jobTitle": Job.title,
    "status": Application.status,
    "submittedAt": Application.submitted_at,
}


@router.get("")
async def list_applications(
    q: Optional[str] = None,
    job_id: Optional[str] = Query(None, alias="jobId"),
    status: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_dir: Optional[str] = Query(None, alias="sortDir"),
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    page: Optional[str] = None,
    staff: CurrentUser = Depends(require_staff),
):
    key, direction = read_sort(sort_by, sort_dir, APPLICATION_SORT_COLUMNS, "submittedAt")

    stmt = (
        select(Application)
        .join(Application.applicant)
        .join(Application.job)
        .options(contains_eager(Application.applicant), contains_eager(Application.job))
        .where(Application.deleted_at.is_(None))
    )
    if job_id:
        stmt = stmt.where(Application.job_id == job_id)
    if status in ApplicationStatus.__members__:
        stmt = stmt.where(Application.status == ApplicationStatus(status))
    term = (q or "").strip()
    if term:
        stmt = stmt.where(
            or_(
                User.firstname.icontains(term, autoescape=True),
                User.lastname.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
                Job.title.icontains(term, autoescape=True),
                Job.company.icontains(term, autoescape=True),
            )
        )

    with get_db_session() as db:
        if key == "submittedAt":
            params = read_pagination_params(limit, cursor)
            rows, next_cursor = fetch_cursor_page(
                db, stmt, Application, Application.submitted_at, direction, params
            )
            items = [ApplicationListItem.model_validate(a) for a in rows]
            return ok(items, cursor_meta(params.limit, key, direction, next_cursor))

        params = read_offset_params(limit, page)
        rows, total = fetch_offset_page(
            db, stmt, Application, APPLICATION_SORT_COLUMNS[key], direction, params
        )
        items = [ApplicationListItem.model_validate(a) for a in rows]
        return ok(items, offset_meta(params.limit, key, direction, params.page, total))


@router.get("/{application_id}")
async def get_application(application_id: str, staff: CurrentUser = Depends(require_staff)):
    with get_db_session() as db:
        application = db.scalar(
            select(Application)
            .where(Application.id == application_id)
            .options(selectinload(Application.job), selectinload(Application.applicant))
        )
        if application is None:
            raise NotFoundError("Application not found")
        return ok(ApplicationDetail.model_validate(application))


@router.patch("/{application_id}")
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    staff: CurrentUser = Depends(require_staff),
):
    """Status change and the applicant's notification commit together."""
    with get_db_session() as db:
        application = db.get(Application, application_id)
        if application is None:
            raise NotFoundError("Application not found")
        application.status = data.status
        notify_status_change(db, application, data.status)
        result = {"id": application.id, "status": application.status}

    logger.info(
        "application_status_changed",
        application_id=application_id,
        status=data.status.value,
        by=staff.id,
    )
    return ok(result)
