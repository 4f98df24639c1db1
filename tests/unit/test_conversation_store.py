"""
Tests for the saved conversation repository.

WHAT: Test create, list, read, partial update and delete
WHY: Saved conversations are the only state that outlives a request
HOW: In-memory SQLite session from conftest
"""

from datetime import datetime, timedelta

import pytest

from cartai.core.models import SavedConversation
from cartai.models.api_schemas import ConversationCreate, ConversationUpdate
from cartai.models.negotiation import NegotiationResult, Offer
from cartai.services import conversation_store
from cartai.services.conversation_store import derive_title
from cartai.utils.exceptions import ConversationNotFoundException


def chat(content: str) -> dict:
    return {"id": "m1", "type": "user", "content": content, "timestamp": "2026-01-05T10:00:00"}


def result() -> NegotiationResult:
    winner = Offer(
        seller_id="seller_budget",
        seller_name="ValueGreen",
        price=90.0,
        carbon_footprint=20.0,
        delivery_days=7,
    )
    return NegotiationResult(winner=winner, reasoning="Lowest price.", total_rounds=6)


@pytest.mark.unit
class TestDeriveTitle:

    def test_product_wins(self):
        assert derive_title("desk lamps", [chat("hello")]) == "desk lamps"

    def test_first_message_preview(self):
        message = "I need something for my new apartment kitchen"
        assert derive_title(None, [chat(message)]) == message[:30]

    def test_default_title(self):
        assert derive_title(None, []) == "New Conversation"


@pytest.mark.unit
class TestConversationStore:

    def test_create_and_get(self, db):
        created = conversation_store.create_conversation(db, ConversationCreate(
            chat_messages=[chat("Looking for toothbrushes")],
            product="bamboo toothbrushes",
            quantity=10,
            budget=3.5,
            selected_priority="carbon",
        ))

        loaded = conversation_store.get_conversation(db, created.id)

        assert loaded.title == "bamboo toothbrushes"
        assert loaded.quantity == 10
        assert loaded.selected_priority == "carbon"
        assert loaded.chat_messages[0].content == "Looking for toothbrushes"
        assert loaded.negotiation_messages == []
        assert loaded.negotiation_result is None

    def test_explicit_title_is_kept(self, db):
        created = conversation_store.create_conversation(
            db, ConversationCreate(title="Kitchen refresh", product="kettles")
        )

        assert created.title == "Kitchen refresh"

    def test_result_round_trips_through_json_column(self, db):
        created = conversation_store.create_conversation(
            db, ConversationCreate(product="notebooks", negotiation_result=result())
        )

        loaded = conversation_store.get_conversation(db, created.id)

        assert loaded.negotiation_result.winner.seller_name == "ValueGreen"
        assert loaded.negotiation_result.total_rounds == 6

    def test_list_is_newest_first(self, db):
        older = conversation_store.create_conversation(db, ConversationCreate(product="older"))
        newer = conversation_store.create_conversation(
            db, ConversationCreate(product="newer", negotiation_result=result())
        )
        db.get(SavedConversation, older.id).created_at = datetime(2026, 1, 1)
        db.get(SavedConversation, newer.id).created_at = datetime(2026, 1, 1) + timedelta(days=1)
        db.flush()

        summaries = conversation_store.list_conversations(db)

        assert [s.title for s in summaries] == ["newer", "older"]
        assert summaries[0].has_result is True
        assert summaries[1].has_result is False

    def test_partial_update(self, db):
        created = conversation_store.create_conversation(
            db, ConversationCreate(chat_messages=[chat("hi there")])
        )
        assert created.title == "hi there"

        updated = conversation_store.update_conversation(
            db, created.id, ConversationUpdate(product="desk lamps", quantity=2)
        )

        assert updated.title == "desk lamps"
        assert updated.quantity == 2
        assert updated.chat_messages[0].content == "hi there"
        assert updated.updated_at >= created.updated_at

    def test_update_with_explicit_title(self, db):
        created = conversation_store.create_conversation(db, ConversationCreate(product="lamps"))

        updated = conversation_store.update_conversation(
            db, created.id, ConversationUpdate(title="Lighting")
        )

        assert updated.title == "Lighting"
        assert updated.product == "lamps"

    def test_delete(self, db):
        created = conversation_store.create_conversation(db, ConversationCreate(product="lamps"))

        conversation_store.delete_conversation(db, created.id)

        with pytest.raises(ConversationNotFoundException):
            conversation_store.get_conversation(db, created.id)

    @pytest.mark.parametrize("operation", ["get", "update", "delete"])
    def test_unknown_id_raises(self, db, operation):
        with pytest.raises(ConversationNotFoundException):
            if operation == "get":
                conversation_store.get_conversation(db, "missing")
            elif operation == "update":
                conversation_store.update_conversation(db, "missing", ConversationUpdate(quantity=1))
            else:
                conversation_store.delete_conversation(db, "missing")
