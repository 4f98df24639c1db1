"""
Saved conversation endpoints.

WHAT: CRUD over saved shopping conversations
WHY: Users revisit earlier negotiations
HOW: FastAPI router delegating to the conversation store with a request-scoped session
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ....core.database import db_session
from ....models.api_schemas import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    ConversationUpdate,
    DeleteConversationResponse,
)
from ....services import conversation_store

router = APIRouter()


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
def create_conversation(payload: ConversationCreate, db: Session = Depends(db_session)):
    return conversation_store.create_conversation(db, payload)


@router.get("/conversations", response_model=List[ConversationSummary])
def list_conversations(db: Session = Depends(db_session)):
    return conversation_store.list_conversations(db)


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse)
def get_conversation(conversation_id: str, db: Session = Depends(db_session)):
    """
    Load one saved conversation.

    Raises:
        ConversationNotFoundException: 404 if the id is unknown
    """
    return conversation_store.get_conversation(db, conversation_id)


@router.put("/conversations/{conversation_id}", response_model=ConversationResponse)
def update_conversation(conversation_id: str, payload: ConversationUpdate, db: Session = Depends(db_session)):
    return conversation_store.update_conversation(db, conversation_id, payload)


@router.delete("/conversations/{conversation_id}", response_model=DeleteConversationResponse)
def delete_conversation(conversation_id: str, db: Session = Depends(db_session)):
    conversation_store.delete_conversation(db, conversation_id)
    return DeleteConversationResponse(deleted=True, conversation_id=conversation_id)
