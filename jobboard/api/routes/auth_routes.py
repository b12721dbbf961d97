"""
Authentication Routes

POST /auth/signup - Register an applicant account and send the verification email
POST /auth/verify-email - Confirm an email address with the emailed token
POST /auth/resend-verification - Issue a fresh verification token
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user identity
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select

from jobboard.core.auth import (
    CurrentUser,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from jobboard.core.enums import Role
from jobboard.core.errors import (
    BadRequestError,
    ConflictError,
    EmailDeliveryError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.db.models import Profile, User
from jobboard.schemas.schemas import (
    LoginRequest,
    MeResponse,
    ResendVerificationRequest,
    SessionUser,
    SignupRequest,
    TokenResponse,
    UserResponse,
    VerifyEmailRequest,
)
from jobboard.services.accounts import consume_verification_token, issue_verification_token
from jobboard.services.email_service import Mailer, get_mailer, send_verification_email

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", status_code=201)
def signup(request: SignupRequest, mailer: Mailer = Depends(get_mailer)):
    """
    Register a new applicant.

    Staff accounts are created by an admin, never through signup. Runs in the
    threadpool since the mailer call blocks.
    """
    if request.password != request.confirm_password:
        raise BadRequestError("Password does not match, please confirm your password")
    if request.role is not Role.APPLICANT:
        raise BadRequestError("Only applicant accounts can be created through signup")

    with get_db_session() as db:
        existing = db.scalar(select(User.id).where(User.email == request.email))
        if existing:
            raise ConflictError("This user already exists")

        user = User(
            firstname=request.firstname,
            lastname=request.lastname,
            email=request.email,
            role=Role.APPLICANT,
            birth_date=request.birth_date,
            gender=request.gender,
            password=hash_password(request.password),
        )
        db.add(user)
        db.flush()
        db.add(Profile(user_id=user.id, profile_completed=False))
        raw_token = issue_verification_token(db, user.id)
        db.refresh(user)
        created = UserResponse.model_validate(user)

    logger.info("user_signed_up", user_id=created.id)

    try:
        send_verification_email(mailer, created.email, f"{created.firstname} {created.lastname}", raw_token)
    except EmailDeliveryError as e:
        raise BadRequestError(str(e)) from e

    return ok(created)


@router.post("/verify-email")
async def verify_email(request: VerifyEmailRequest):
    """Mark the token owner's email verified and drop the token."""
    with get_db_session() as db:
        user = consume_verification_token(db, request.token)
        logger.info("email_verified", user_id=user.id)
    return ok(None)


@router.post("/resend-verification")
def resend_verification(request: ResendVerificationRequest, mailer: Mailer = Depends(get_mailer)):
    """Issue a fresh token and mail it; sync so the blocking send stays off the event loop."""
    with get_db_session() as db:
        user = db.scalar(select(User).where(User.email == request.email))
        if user is None:
            raise NotFoundError("User not found")
        if user.email_verified is not None:
            raise BadRequestError("Email already verified")
        raw_token = issue_verification_token(db, user.id)
        email, name = user.email, user.full_name

    try:
        send_verification_email(mailer, email, name, raw_token)
    except EmailDeliveryError as e:
        raise BadRequestError(str(e)) from e

    return ok({"message": "Verification email sent"})


@router.post("/login")
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.scalar(select(User).where(User.email == request.email))
        if user is None or user.deleted_at is not None:
            raise UnauthorizedError("Invalid email or password")
        if not verify_password(request.password, user.password):
            raise UnauthorizedError("Invalid email or password")
        if user.email_verified is None:
            raise ForbiddenError("Please verify your email before signing in")
        if user.is_suspended:
            raise ForbiddenError("Account suspended")

        profile_completed = bool(user.applicant_info and user.applicant_info.profile_completed)
        session_user = SessionUser(
            id=user.id,
            role=user.role,
            email=user.email,
            firstname=user.firstname,
            lastname=user.lastname,
            profile_completed=profile_completed,
        )

    token = create_access_token(data={"sub": session_user.id, "role": session_user.role.value})
    logger.info("user_logged_in", user_id=session_user.id)
    return ok(TokenResponse(access_token=token, user=session_user))


@router.get("/me")
async def get_me(user: CurrentUser = Depends(get_current_user)):
    """Get current authenticated user's identity."""
    return ok(MeResponse(id=user.id, role=user.role, email=user.email))
