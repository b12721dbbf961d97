"""
Authentication Utility - JWT, password hashing and role gates.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes; the user row is re-read on
  every request so suspension and deletion take effect immediately
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select

from jobboard.core.config import get_settings
from jobboard.core.enums import Role, SenderRole
from jobboard.core.errors import ForbiddenError, UnauthorizedError
from jobboard.db.database import get_db_session
from jobboard.db.models import Profile, User

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; missing headers are reported through our envelope
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    role: Role
    email: str

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    @property
    def sender_role(self) -> SenderRole:
        return self.role.sender_side()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise UnauthorizedError()

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    with get_db_session() as db:
        user = db.get(User, payload["sub"])
        if user is None or user.deleted_at is not None:
            raise UnauthorizedError()
        if user.is_suspended:
            raise ForbiddenError("Account suspended")
        return CurrentUser(id=user.id, role=user.role, email=user.email)


async def get_current_profile_id(user: CurrentUser = Depends(get_current_user)) -> str:
    """Dependency - the caller's applicant profile id."""
    with get_db_session() as db:
        profile_id = db.scalar(select(Profile.id).where(Profile.user_id == user.id))
    if profile_id is None:
        raise UnauthorizedError()
    return profile_id


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - ADMIN only; every other role is unauthorized."""
    if user.role is not Role.ADMIN:
        raise UnauthorizedError()
    return user


async def require_staff(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - ADMIN or HR."""
    if not user.is_staff:
        raise ForbiddenError()
    return user


async def require_applicant(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - APPLICANT only."""
    if user.role is not Role.APPLICANT:
        raise ForbiddenError()
    return user
