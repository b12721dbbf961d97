"""
Account helpers - email verification tokens.

The raw token only ever leaves in the verification link; the database keeps
its sha256 digest.
"""

import hashlib
import secrets
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from jobboard.core.config import get_settings
from jobboard.core.errors import BadRequestError
from jobboard.db.models import EmailVerificationToken, User, utcnow


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def issue_verification_token(db: Session, user_id: str) -> str:
    """Replace any pending token for the user and return the new raw token."""
    settings = get_settings()
    raw_token = secrets.token_hex(32)

    db.execute(delete(EmailVerificationToken).where(EmailVerificationToken.user_id == user_id))
    db.add(
        EmailVerificationToken(
            user_id=user_id,
            token_hash=hash_token(raw_token),
            expires=utcnow() + timedelta(minutes=settings.verification_token_minutes),
        )
    )
    db.flush()
    return raw_token


def consume_verification_token(db: Session, raw_token: str) -> User:
    """Mark the owner verified and delete the token; both happen in the caller's transaction."""
    record = db.scalar(
        select(EmailVerificationToken).where(
            EmailVerificationToken.token_hash == hash_token(raw_token)
        )
    )
    if record is None or record.expires < utcnow():
        raise BadRequestError("Token is invalid or expired")

    user = db.get(User, record.user_id)
    user.email_verified = utcnow()
    db.delete(record)
    return user
