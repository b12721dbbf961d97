"""
Conversation and message accessors.

A conversation belongs to exactly one applicant profile. Staff (ADMIN, HR)
see every conversation; an applicant only sees their own, and touching
anyone else's is unauthorized.
"""

from typing import List, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from jobboard.core.auth import CurrentUser
from jobboard.core.enums import SenderRole
from jobboard.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from jobboard.db.models import Conversation, Message, Profile, utcnow

logger = structlog.get_logger(__name__)


def profile_id_for(db: Session, user_id: str) -> Optional[str]:
    return db.scalar(select(Profile.id).where(Profile.user_id == user_id))


def get_accessible_conversation(
    db: Session, conversation_id: str, user: CurrentUser, missing_message: str = "Conversation not found"
) -> Conversation:
    """Load a conversation the caller may access. NotFound before Unauthorized."""
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError(missing_message)

    if not user.is_staff:
        profile_id = profile_id_for(db, user.id)
        if profile_id is None or conversation.applicant_profile_id != profile_id:
            raise UnauthorizedError()
    return conversation


def list_conversations(db: Session, user: CurrentUser) -> List[Conversation]:
    stmt = select(Conversation).order_by(
        Conversation.last_message_at.desc().nulls_last(), Conversation.created_at.desc()
    )
    if user.is_staff:
        stmt = stmt.options(selectinload(Conversation.applicant).selectinload(Profile.user))
    else:
        profile_id = profile_id_for(db, user.id)
        if profile_id is None:
            raise UnauthorizedError()
        stmt = stmt.where(Conversation.applicant_profile_id == profile_id)
    return list(db.scalars(stmt).all())


def create_conversation(
    db: Session,
    user: CurrentUser,
    subject: Optional[str] = None,
    initial_message: Optional[str] = None,
    applicant_profile_id: Optional[str] = None,
) -> Conversation:
    if user.is_staff:
        if not applicant_profile_id:
            raise BadRequestError("applicantProfileId is required")
        if db.get(Profile, applicant_profile_id) is None:
            raise NotFoundError("Applicant profile not found")
        owner_profile_id = applicant_profile_id
    else:
        owner_profile_id = profile_id_for(db, user.id)
        if owner_profile_id is None:
            raise UnauthorizedError()

    conversation = Conversation(applicant_profile_id=owner_profile_id, subject=subject)
    db.add(conversation)

    content = (initial_message or "").strip()
    if content:
        now = utcnow()
        conversation.last_message_at = now
        conversation.messages.append(
            Message(
                sender_role=user.sender_role,
                sender_user_id=user.id,
                content=content,
                created_at=now,
            )
        )

    db.flush()
    db.refresh(conversation)
    logger.info("conversation_created", conversation_id=conversation.id, by=user.id)
    return conversation


def list_messages(db: Session, conversation_id: str) -> List[Message]:
    return list(
        db.scalars(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        ).all()
    )


def append_message(db: Session, conversation: Conversation, user: CurrentUser, content: Optional[str]) -> Message:
    body = (content or "").strip()
    if not body:
        raise BadRequestError("Invalid content")

    message = Message(
        conversation_id=conversation.id,
        sender_role=user.sender_role,
        sender_user_id=user.id,
        content=body,
        created_at=utcnow(),
    )
    db.add(message)
    conversation.last_message_at = message.created_at
    db.flush()
    return message


def mark_as_read(db: Session, conversation_id: str, requester: SenderRole) -> int:
    """
    Stamp readAt on every unread message sent by the other side.

    One set-based UPDATE; a second call finds nothing left and returns 0.
    """
    result = db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_role != requester,
            Message.read_at.is_(None),
        )
        .values(read_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
