"""
Saved conversation repository.

WHAT: Create, list, read, update and delete saved shopping conversations
WHY: The negotiation engine produces values; this is where a user keeps them
HOW: SQLAlchemy session passed in by the caller, pydantic models in and out
"""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.models import SavedConversation
from ..models.api_schemas import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    ConversationUpdate,
)
from ..utils.exceptions import ConversationNotFoundException
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE = "New Conversation"
TITLE_PREVIEW_CHARS = 30

_JSON_LIST_FIELDS = ("chat_messages", "negotiation_messages")


def derive_title(product: str | None, chat_messages: list) -> str:
    """Title from the product, else the first chat message, else a default."""
    if product:
        return product
    if chat_messages:
        first = chat_messages[0]
        content = first["content"] if isinstance(first, dict) else first.content
        if content:
            return content[:TITLE_PREVIEW_CHARS]
    return DEFAULT_TITLE


def _to_response(row: SavedConversation) -> ConversationResponse:
    return ConversationResponse(
        id=row.conversation_id,
        title=row.title,
        created_at=row.created_at,
        updated_at=row.updated_at,
        chat_messages=row.chat_messages or [],
        product=row.product,
        quantity=row.quantity,
        budget=row.budget,
        selected_priority=row.selected_priority,
        negotiation_messages=row.negotiation_messages or [],
        negotiation_result=row.negotiation_result,
    )


def _get_row(db: Session, conversation_id: str) -> SavedConversation:
    row = db.get(SavedConversation, conversation_id)
    if row is None:
        raise ConversationNotFoundException(conversation_id)
    return row


def create_conversation(db: Session, payload: ConversationCreate) -> ConversationResponse:
    """
    Persist a new conversation.

    Args:
        db: Database session
        payload: Conversation contents

    Returns:
        The stored conversation
    """
    data = payload.model_dump(mode="json")
    row = SavedConversation(
        title=data.pop("title") or derive_title(data["product"], data["chat_messages"]),
        **data,
    )
    db.add(row)
    db.flush()

    logger.info(f"Saved conversation {row.conversation_id} ({row.title})")
    return _to_response(row)


def list_conversations(db: Session) -> List[ConversationSummary]:
    """All saved conversations, newest first."""
    rows = db.execute(
        select(SavedConversation).order_by(SavedConversation.created_at.desc())
    ).scalars().all()

    return [
        ConversationSummary(
            id=row.conversation_id,
            title=row.title,
            created_at=row.created_at,
            updated_at=row.updated_at,
            product=row.product,
            selected_priority=row.selected_priority,
            has_result=row.negotiation_result is not None,
        )
        for row in rows
    ]


def get_conversation(db: Session, conversation_id: str) -> ConversationResponse:
    """
    Load one conversation.

    Raises:
        ConversationNotFoundException: If no conversation has this id
    """
    return _to_response(_get_row(db, conversation_id))


def update_conversation(db: Session, conversation_id: str, payload: ConversationUpdate) -> ConversationResponse:
    """
    Apply a partial update.

    Only fields present in the request body change; the title is re-derived
    when the caller did not set one explicitly.

    Raises:
        ConversationNotFoundException: If no conversation has this id
    """
    row = _get_row(db, conversation_id)
    changes = payload.model_dump(mode="json", exclude_unset=True)

    for field, value in changes.items():
        if field in _JSON_LIST_FIELDS and value is None:
            value = []
        setattr(row, field, value)

    if not changes.get("title"):
        row.title = derive_title(row.product, row.chat_messages or [])
    row.updated_at = datetime.utcnow()
    db.flush()

    logger.info(f"Updated conversation {conversation_id}: {sorted(changes)}")
    return _to_response(row)


def delete_conversation(db: Session, conversation_id: str) -> None:
    """
    Delete one conversation.

    Raises:
        ConversationNotFoundException: If no conversation has this id
    """
    row = _get_row(db, conversation_id)
    db.delete(row)
    db.flush()
    logger.info(f"Deleted conversation {conversation_id}")
