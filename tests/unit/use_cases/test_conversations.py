"""Tests de conversaciones y mensajes de texto."""

from decimal import Decimal

import pytest

from marketplace.api.dependencies import build_use_cases
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.message import MessageType
from marketplace.domain.errors import (
    AuthenticationRequiredError,
    ConversationNotFoundError,
    ListingNotFoundError,
    NotAllowedError,
    ValidationError,
)
from marketplace.infrastructure.in_memory import InMemoryConversationRepo
from tests.conftest import BUYER_ID, LISTING_ID, NOW, OWNER_ID


class RacingConversationRepo(InMemoryConversationRepo):
    """La primera búsqueda no ve la fila que otra petición ya insertó."""

    def __init__(self) -> None:
        super().__init__()
        self.find_calls = 0

    async def find(self, listing_id, listing_kind, buyer_id, seller_id):
        self.find_calls += 1
        if self.find_calls == 1:
            return None
        return await super().find(listing_id, listing_kind, buyer_id, seller_id)


class TestEnsureConversation:
    @pytest.mark.asyncio
    async def test_creates_once_and_reuses(self, use_cases, buyer):
        first = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)
        second = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        assert first.id == second.id
        assert first.buyer_id == BUYER_ID
        assert first.seller_id == OWNER_ID

    @pytest.mark.asyncio
    async def test_lost_race_returns_winner(self, memory_bundle, settings, clock, ids, notifier, buyer):
        repo = RacingConversationRepo()
        winner = Conversation(
            id="winner",
            listing_id=LISTING_ID,
            listing_kind=ListingKind.LODGING,
            buyer_id=BUYER_ID,
            seller_id=OWNER_ID,
            created_at=NOW,
        )
        await repo.create(winner)
        memory_bundle["conversation_repo"] = repo
        use_cases = build_use_cases(memory_bundle, settings, clock, ids, notifier)

        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        assert conversation.id == "winner"
        assert repo.find_calls == 2

    @pytest.mark.asyncio
    async def test_owner_cannot_open_conversation_with_self(self, use_cases, owner):
        with pytest.raises(NotAllowedError):
            await use_cases["ensure_conversation"].execute(owner, ListingKind.LODGING, LISTING_ID)

    @pytest.mark.asyncio
    async def test_unknown_listing(self, use_cases, buyer):
        with pytest.raises(ListingNotFoundError):
            await use_cases["ensure_conversation"].execute(buyer, ListingKind.VEHICLE, LISTING_ID)

    @pytest.mark.asyncio
    async def test_requires_principal(self, use_cases):
        with pytest.raises(AuthenticationRequiredError):
            await use_cases["ensure_conversation"].execute(None, ListingKind.LODGING, LISTING_ID)


class TestListConversations:
    @pytest.mark.asyncio
    async def test_previews_and_roles(self, use_cases, clock, buyer, owner):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)
        await use_cases["send_text"].execute(buyer, conversation.id, "Bonjour")
        clock.advance(minutes=1)
        await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))

        buyer_view = await use_cases["list_conversations"].execute(buyer)
        owner_view = await use_cases["list_conversations"].execute(owner)

        assert len(buyer_view) == 1
        assert buyer_view[0].role == "buyer"
        assert buyer_view[0].counterpart_id == OWNER_ID
        assert buyer_view[0].last_message_preview == "Proposition • 70 XOF"
        assert owner_view[0].role == "seller"
        assert owner_view[0].counterpart_id == BUYER_ID

    @pytest.mark.asyncio
    async def test_stranger_sees_nothing(self, use_cases, buyer, stranger):
        await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        assert await use_cases["list_conversations"].execute(stranger) == []


class TestMessages:
    @pytest.mark.asyncio
    async def test_send_text_trims_and_touches_conversation(self, use_cases, memory_bundle, clock, buyer, notifier):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)
        clock.advance(minutes=3)

        message = await use_cases["send_text"].execute(buyer, conversation.id, "  Bonjour  ")

        assert message.type == MessageType.TEXT
        assert message.content == "Bonjour"
        stored = await memory_bundle["conversation_repo"].get(conversation.id)
        assert stored.last_message_at == clock.now()
        assert notifier.published[-1].table == "messages"

    @pytest.mark.asyncio
    async def test_empty_text_is_rejected(self, use_cases, buyer):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        with pytest.raises(ValidationError):
            await use_cases["send_text"].execute(buyer, conversation.id, "   ")

    @pytest.mark.asyncio
    async def test_fetch_pages_in_chronological_order(self, use_cases, clock, buyer, owner):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)
        sent = []
        for text in ("un", "deux", "trois"):
            sent.append(await use_cases["send_text"].execute(buyer, conversation.id, text))
            clock.advance(minutes=1)

        first_page = await use_cases["fetch_messages"].execute(owner, conversation.id, limit=2)
        older = await use_cases["fetch_messages"].execute(
            owner, conversation.id, limit=1, before=sent[2].created_at
        )

        assert [m.content for m in first_page] == ["un", "deux"]
        assert [m.content for m in older] == ["deux"]

    @pytest.mark.asyncio
    async def test_fetch_limit_bounds(self, use_cases, buyer):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        with pytest.raises(ValidationError):
            await use_cases["fetch_messages"].execute(buyer, conversation.id, limit=0)

    @pytest.mark.asyncio
    async def test_non_participant_is_rejected(self, use_cases, buyer, stranger):
        conversation = await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)

        with pytest.raises(NotAllowedError):
            await use_cases["fetch_messages"].execute(stranger, conversation.id)
        with pytest.raises(NotAllowedError):
            await use_cases["send_text"].execute(stranger, conversation.id, "salut")

    @pytest.mark.asyncio
    async def test_unknown_conversation(self, use_cases, buyer):
        with pytest.raises(ConversationNotFoundError):
            await use_cases["fetch_messages"].execute(buyer, "missing")
