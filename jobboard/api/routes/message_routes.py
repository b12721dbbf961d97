"""
Messaging Routes

GET /messages/conversations - List conversations (staff: all, applicant: own)
POST /messages/conversations - Start a conversation
GET /messages/conversations/{conversation_id}/messages - List messages, oldest first
POST /messages/conversations/{conversation_id}/messages - Append a message
POST /messages/conversations/{conversation_id}/read - Mark the other side's messages read
"""

import structlog
from fastapi import APIRouter, Depends

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.schemas.schemas import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    StaffConversationResponse,
)
from jobboard.services import messaging

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/messages/conversations", tags=["Messages"])


@router.get("")
async def list_conversations(user: CurrentUser = Depends(get_current_user)):
    schema = StaffConversationResponse if user.is_staff else ConversationResponse
    with get_db_session() as db:
        rows = messaging.list_conversations(db, user)
        return ok([schema.model_validate(c) for c in rows])


@router.post("", status_code=201)
async def create_conversation(data: ConversationCreate, user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        conversation = messaging.create_conversation(
            db,
            user,
            subject=data.subject,
            initial_message=data.initial_message,
            applicant_profile_id=data.applicant_profile_id,
        )
        return ok(ConversationResponse.model_validate(conversation))


@router.get("/{conversation_id}/messages")
async def list_messages(conversation_id: str, user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        messaging.get_accessible_conversation(db, conversation_id, user, missing_message="Not found")
        rows = messaging.list_messages(db, conversation_id)
        return ok([MessageResponse.model_validate(m) for m in rows])


@router.post("/{conversation_id}/messages", status_code=201)
async def post_message(
    conversation_id: str, data: MessageCreate, user: CurrentUser = Depends(get_current_user)
):
    with get_db_session() as db:
        conversation = messaging.get_accessible_conversation(db, conversation_id, user)
        message = messaging.append_message(db, conversation, user, data.content)
        return ok(MessageResponse.model_validate(message))


@router.post("/{conversation_id}/read")
async def mark_read(conversation_id: str, user: CurrentUser = Depends(get_current_user)):
    with get_db_session() as db:
        messaging.get_accessible_conversation(db, conversation_id, user)
        updated = messaging.mark_as_read(db, conversation_id, user.sender_role)

    logger.debug("conversation_read", conversation_id=conversation_id, updated=updated)
    return ok({"updatedCount": updated})
