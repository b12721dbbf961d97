"""
Notification accessors.

Every query is scoped by user id, so a caller can never read or toggle
another user's notifications.
"""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from jobboard.core.enums import ApplicationStatus
from jobboard.db.models import Application, Notification


def list_notifications(db: Session, user_id: str) -> List[Notification]:
    return list(
        db.scalars(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        ).all()
    )


def mark_unread(db: Session, user_id: str, notification_id: str) -> bool:
    """False when the id is unknown or belongs to someone else."""
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def mark_all_read(db: Session, user_id: str) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def notify_status_change(db: Session, application: Application, status: ApplicationStatus) -> Notification:
    job = application.job
    notification = Notification(
        user_id=application.applicant_id,
        message=(
            f"Your application for {job.title} at {job.company} "
            f"has been updated to {status.value}"
        ),
        type=status.value,
        company=job.company,
        job_title=job.title,
        location=job.location,
        is_read=False,
    )
    db.add(notification)
    return notification
