from dataclasses import replace

from marketplace.application.dtos.conversation_dto import NegotiationStateDTO
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.use_cases.access import conversation_role, load_conversation, require_principal
from marketplace.domain.constants import OFFER_RESERVATION_WINDOW_HOURS, OFFER_WARNING_HOURS
from marketplace.domain.entities.principal import Principal
from marketplace.domain.services.negotiation import (
    composer_mode,
    latest_acceptance,
    latest_offer,
    latest_unanswered_offer,
    reservation_window,
    suggest_offer_prices,
)


class GetNegotiationStateUseCase:
    def __init__(
        self,
        conversation_repo: ConversationRepo,
        message_repo: MessageRepo,
        listing_repo: ListingRepo,
        clock: Clock,
        window_hours: int = OFFER_RESERVATION_WINDOW_HOURS,
        warning_hours: int = OFFER_WARNING_HOURS,
    ) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo
        self._listing_repo = listing_repo
        self._clock = clock
        self._window_hours = window_hours
        self._warning_hours = warning_hours

    async def execute(self, principal: Principal | None, conversation_id: str) -> NegotiationStateDTO:
        principal = require_principal(principal)
        conversation = await load_conversation(self._conversation_repo, principal, conversation_id)
        history = await self._message_repo.list_for_conversation(conversation_id)
        listing = await self._listing_repo.get(conversation.listing_kind, conversation.listing_id)

        acceptance = latest_acceptance(history)
        window = None
        if acceptance is not None:
            window = reservation_window(
                acceptance,
                self._clock.now(),
                window_hours=self._window_hours,
                warning_hours=self._warning_hours,
            )
            # Solo el comprador reserva desde una aceptación
            if not conversation.is_buyer(principal.id):
                window = replace(window, can_reserve=False)

        return NegotiationStateDTO(
            conversation_id=conversation_id,
            role=conversation_role(conversation, principal),
            composer_mode=composer_mode(history, conversation, principal.id),
            latest_offer=latest_offer(history),
            open_offer=latest_unanswered_offer(history),
            acceptance=acceptance,
            window=window,
            suggestions=suggest_offer_prices(listing.base_price if listing else None),
        )
