import logging
from enum import Enum

from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import IdGenerator
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import load_conversation, require_principal
from marketplace.application.use_cases.messaging import append_message
from marketplace.domain.entities.message import Message, MessageType
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import (
    CheckViolationError,
    MessageNotFoundError,
    NotAllowedError,
    OfferConflictError,
    UniqueViolationError,
)
from marketplace.domain.services.negotiation import latest_unanswered_offer
from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.offer_meta import (
    ACTION_OFFER_ACCEPT,
    ACTION_OFFER_REJECT,
    AcceptedOffer,
    OfferMeta,
    RejectedOffer,
    SystemAction,
)

OFFER_ALREADY_ANSWERED = "Cette offre n'est plus la dernière offre en attente"


class OfferDecision(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class RespondToOfferUseCase:
    """
    Acepta o rechaza la última oferta sin respuesta.

    La unicidad de la respuesta por oferta la garantiza el repositorio de
    mensajes; dos respuestas concurrentes dejan una sola y la otra recibe
    OfferConflictError.
    """

    def __init__(
        self,
        conversation_repo: ConversationRepo,
        message_repo: MessageRepo,
        listing_repo: ListingRepo,
        id_generator: IdGenerator,
        clock: Clock,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
        typed_offer_responses: bool = True,
        default_currency: str = "XOF",
    ) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo
        self._listing_repo = listing_repo
        self._id_generator = id_generator
        self._clock = clock
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._typed_offer_responses = typed_offer_responses
        self._default_currency = default_currency
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal | None,
        conversation_id: str,
        offer_message_id: str,
        decision: OfferDecision,
    ) -> Message:
        principal = require_principal(principal)
        conversation = await load_conversation(self._conversation_repo, principal, conversation_id)

        offer = await self._message_repo.get(offer_message_id)
        if offer is None or offer.conversation_id != conversation_id or offer.type != MessageType.OFFER:
            raise MessageNotFoundError(offer_message_id)
        if offer.sender_id == principal.id:
            raise NotAllowedError("répondre à l'offre", "vous ne pouvez pas répondre à votre propre offre")

        history = await self._message_repo.list_for_conversation(conversation_id)
        open_offer = latest_unanswered_offer(history)
        if open_offer is None or open_offer.id != offer.id:
            raise OfferConflictError(OFFER_ALREADY_ANSWERED)

        listing = await self._listing_repo.get(conversation.listing_kind, conversation.listing_id)
        currency = listing.currency_code if listing else self._default_currency

        if self._typed_offer_responses:
            message = self._build(principal, offer, decision, currency, typed=True)
            try:
                await self._append(message)
                return message
            except CheckViolationError:
                self._logger.warning(
                    "Typed offer response rejected by backend, falling back to system message",
                    extra={"conversation_id": conversation_id, "offer_id": offer.id, "decision": decision.value},
                )

        message = self._build(principal, offer, decision, currency, typed=False)
        await self._append(message)
        return message

    async def _append(self, message: Message) -> None:
        try:
            await append_message(
                self._transaction_manager, self._message_repo, self._conversation_repo, self._notifier, message
            )
        except UniqueViolationError as exc:
            self._logger.info(
                "Offer already answered",
                extra={"conversation_id": message.conversation_id, "offer_id": message.responded_offer_id},
            )
            raise OfferConflictError(OFFER_ALREADY_ANSWERED) from exc

    def _build(
        self, principal: Principal, offer: Message, decision: OfferDecision, currency: str, typed: bool
    ) -> Message:
        accept = decision == OfferDecision.ACCEPT
        meta: OfferMeta
        if typed:
            message_type = MessageType.OFFER_ACCEPT if accept else MessageType.OFFER_REJECT
            meta = AcceptedOffer(accepted_from=offer.id) if accept else RejectedOffer(rejected_from=offer.id)
        else:
            message_type = MessageType.SYSTEM
            meta = SystemAction(action=ACTION_OFFER_ACCEPT if accept else ACTION_OFFER_REJECT, source_id=offer.id)

        if accept:
            content = f"Offre acceptée à {Money(amount=offer.price or 0, currency_code=currency)}"
        else:
            content = "Offre refusée"

        return Message(
            id=self._id_generator.new_id(),
            conversation_id=offer.conversation_id,
            sender_id=principal.id,
            type=message_type,
            content=content,
            price=offer.price,
            meta=meta.to_dict(),
            created_at=self._clock.now(),
        )
