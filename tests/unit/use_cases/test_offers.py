"""Tests de la negociación: ofertas, respuestas y ventana de reserva."""

import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

from marketplace.application.use_cases.respond_to_offer import OfferDecision
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.message import MessageType
from marketplace.domain.errors import (
    MessageNotFoundError,
    NotAllowedError,
    OfferConflictError,
    ValidationError,
)
from marketplace.domain.services.negotiation import ComposerMode
from tests.conftest import LISTING_ID, make_listing


@pytest_asyncio.fixture
async def conversation(use_cases, buyer):
    return await use_cases["ensure_conversation"].execute(buyer, ListingKind.LODGING, LISTING_ID)


class TestProposeOffer:
    @pytest.mark.asyncio
    async def test_first_buyer_offer_is_initial(self, use_cases, conversation, buyer):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))

        assert offer.type == MessageType.OFFER
        assert offer.price == Decimal("70")
        assert offer.meta == {"kind": "initial_offer"}
        assert offer.content == "Je propose 70 XOF"

    @pytest.mark.asyncio
    async def test_amount_must_be_positive(self, use_cases, conversation, buyer):
        with pytest.raises(ValidationError):
            await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("0"))

    @pytest.mark.asyncio
    async def test_buyer_waits_for_answer(self, use_cases, conversation, buyer):
        await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))

        with pytest.raises(OfferConflictError):
            await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("75"))

    @pytest.mark.asyncio
    async def test_seller_cannot_open_negotiation(self, use_cases, conversation, owner):
        with pytest.raises(OfferConflictError):
            await use_cases["propose_offer"].execute(owner, conversation.id, Decimal("90"))

    @pytest.mark.asyncio
    async def test_seller_counter_offer_points_to_buyer_offer(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)

        counter = await use_cases["propose_offer"].execute(owner, conversation.id, Decimal("85"))

        assert counter.meta == {"negotiation": True, "countered_from": offer.id}

    @pytest.mark.asyncio
    async def test_buyer_reopens_after_rejection(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("50"))
        clock.advance(minutes=1)
        await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.REJECT)
        clock.advance(minutes=1)

        reopened = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("65"))

        assert reopened.meta == {"negotiation": True, "reopened_from": offer.id}
        assert reopened.content == "Je négocie pour 65 XOF"


class TestRespondToOffer:
    @pytest.mark.asyncio
    async def test_accept_writes_typed_message(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)

        acceptance = await use_cases["respond_to_offer"].execute(
            owner, conversation.id, offer.id, OfferDecision.ACCEPT
        )

        assert acceptance.type == MessageType.OFFER_ACCEPT
        assert acceptance.price == Decimal("70")
        assert acceptance.meta == {"accepted_from": offer.id}

    @pytest.mark.asyncio
    async def test_falls_back_to_system_message(self, use_cases, memory_bundle, conversation, clock, buyer, owner):
        memory_bundle["message_repo"].reject_typed_responses = True
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)

        acceptance = await use_cases["respond_to_offer"].execute(
            owner, conversation.id, offer.id, OfferDecision.ACCEPT
        )

        assert acceptance.type == MessageType.SYSTEM
        assert acceptance.meta == {"accepted_from": offer.id, "action": "offer_accept"}
        state = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        assert state.acceptance.id == acceptance.id
        assert state.composer_mode == ComposerMode.CLOSED

    @pytest.mark.asyncio
    async def test_cannot_answer_own_offer(self, use_cases, conversation, buyer):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))

        with pytest.raises(NotAllowedError):
            await use_cases["respond_to_offer"].execute(buyer, conversation.id, offer.id, OfferDecision.ACCEPT)

    @pytest.mark.asyncio
    async def test_superseded_offer_cannot_be_answered(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)
        await use_cases["propose_offer"].execute(owner, conversation.id, Decimal("85"))

        with pytest.raises(OfferConflictError):
            await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.ACCEPT)

    @pytest.mark.asyncio
    async def test_answered_offer_cannot_be_answered_twice(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)
        await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.REJECT)

        with pytest.raises(OfferConflictError):
            await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.ACCEPT)

    @pytest.mark.asyncio
    async def test_text_message_is_not_an_offer(self, use_cases, conversation, buyer, owner):
        text = await use_cases["send_text"].execute(buyer, conversation.id, "Bonjour")

        with pytest.raises(MessageNotFoundError):
            await use_cases["respond_to_offer"].execute(owner, conversation.id, text.id, OfferDecision.ACCEPT)

    @pytest.mark.asyncio
    async def test_concurrent_answers_keep_a_single_response(
        self, use_cases, memory_bundle, conversation, clock, buyer, owner, monkeypatch
    ):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)
        repo = memory_bundle["message_repo"]
        list_for_conversation = repo.list_for_conversation

        async def slow_list(*args, **kwargs):
            await asyncio.sleep(0)
            return await list_for_conversation(*args, **kwargs)

        monkeypatch.setattr(repo, "list_for_conversation", slow_list)

        results = await asyncio.gather(
            use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.ACCEPT),
            use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.REJECT),
            return_exceptions=True,
        )

        assert sum(isinstance(result, OfferConflictError) for result in results) == 1
        history = await list_for_conversation(conversation.id)
        responses = [m for m in history if m.responded_offer_id == offer.id]
        assert len(responses) == 1

    @pytest.mark.asyncio
    async def test_acceptance_uses_listing_currency(
        self, use_cases, memory_bundle, conversation, clock, buyer, owner
    ):
        await memory_bundle["listing_repo"].save(make_listing(currency_code="EUR"))
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)

        acceptance = await use_cases["respond_to_offer"].execute(
            owner, conversation.id, offer.id, OfferDecision.ACCEPT
        )

        assert acceptance.content == "Offre acceptée à 70 EUR"

    @pytest.mark.asyncio
    async def test_negotiation_closed_after_acceptance(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)
        await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.ACCEPT)

        with pytest.raises(OfferConflictError):
            await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("60"))


class TestNegotiationState:
    @pytest.mark.asyncio
    async def test_initial_state(self, use_cases, conversation, buyer, owner):
        buyer_state = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        owner_state = await use_cases["get_negotiation_state"].execute(owner, conversation.id)

        assert buyer_state.composer_mode == ComposerMode.INITIAL
        assert buyer_state.suggestions == [90, 95, 100, 110]
        assert buyer_state.window is None
        assert owner_state.composer_mode == ComposerMode.HIDDEN

    @pytest.mark.asyncio
    async def test_open_offer_modes(self, use_cases, conversation, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))

        buyer_state = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        owner_state = await use_cases["get_negotiation_state"].execute(owner, conversation.id)

        assert buyer_state.composer_mode == ComposerMode.AWAITING_RESPONSE
        assert owner_state.composer_mode == ComposerMode.NEGOTIATION
        assert owner_state.open_offer.id == offer.id

    @pytest.mark.asyncio
    async def test_window_after_acceptance(self, use_cases, conversation, clock, buyer, owner):
        offer = await use_cases["propose_offer"].execute(buyer, conversation.id, Decimal("70"))
        clock.advance(minutes=1)
        await use_cases["respond_to_offer"].execute(owner, conversation.id, offer.id, OfferDecision.ACCEPT)

        buyer_state = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        owner_state = await use_cases["get_negotiation_state"].execute(owner, conversation.id)

        assert buyer_state.window.can_reserve is True
        assert buyer_state.window.remaining == timedelta(hours=48)
        assert buyer_state.window.warning is False
        assert owner_state.window.can_reserve is False

        clock.advance(hours=30)
        later = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        assert later.window.warning is True
        assert later.window.remaining == timedelta(hours=18)

        clock.advance(hours=18)
        expired = await use_cases["get_negotiation_state"].execute(buyer, conversation.id)
        assert expired.window.can_reserve is False
        assert expired.window.remaining == timedelta(0)
