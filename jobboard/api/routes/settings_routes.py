"""
Account Settings Routes

PATCH /settings/account - Update name, birth date and gender
POST /settings/password - Change password
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select

from jobboard.core.auth import CurrentUser, get_current_user, hash_password, verify_password
from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.db.models import User
from jobboard.schemas.schemas import AccountUpdate, PasswordChange

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.patch("/account")
async def update_account(data: AccountUpdate, user: CurrentUser = Depends(get_current_user)):
    """Email is shown read-only by clients and never changed here."""
    with get_db_session() as db:
        account = db.get(User, user.id)
        account.firstname = data.firstname
        account.lastname = data.lastname
        account.birth_date = data.birth_date
        account.gender = data.gender.value
    return ok(None)


@router.post("/password")
async def change_password(data: PasswordChange, user: CurrentUser = Depends(get_current_user)):
    """Compare and replace the hash under a row lock in one transaction."""
    with get_db_session() as db:
        account = db.scalar(select(User).where(User.id == user.id).with_for_update())
        if account is None:
            raise NotFoundError("Not found")
        if not verify_password(data.current_password, account.password):
            raise BadRequestError("Invalid current password")
        account.password = hash_password(data.new_password)

    logger.info("password_changed", user_id=user.id)
    return ok(None)
