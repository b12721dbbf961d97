"""
Notification Routes

GET /notifications - List own notifications, newest first
PATCH /notifications/{notification_id}/unread - Mark one notification unread
PATCH /notifications/read-all - Mark every unread notification read
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.schemas.schemas import NotificationResponse
from jobboard.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        rows = notification_service.list_notifications(db, user.id)
        return ok([NotificationResponse.model_validate(n) for n in rows])


@router.patch("/read-all")
async def mark_all_read(user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        count = notification_service.mark_all_read(db, user.id)
    return ok({"success": count})


@router.patch("/{notification_id}/unread")
async def mark_unread(notification_id: str, user: CurrentUser = Depends(get_current_user)):
    """Silently reports false for ids the caller does not own."""
    with get_db_session() as db:
        changed = notification_service.mark_unread(db, user.id, notification_id)
    return ok({"success": changed})
