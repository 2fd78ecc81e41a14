import logging
from decimal import Decimal

from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import IdGenerator
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import load_conversation, require_principal
from marketplace.application.use_cases.messaging import append_message
from marketplace.domain.constants import DEFAULT_CURRENCY
from marketplace.domain.entities.message import Message, MessageType
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import OfferConflictError, ValidationError
from marketplace.domain.services.negotiation import (
    ComposerMode,
    composer_mode,
    next_offer_meta,
    offer_content,
)

ALLOWED_MODES = (ComposerMode.INITIAL, ComposerMode.NEGOTIATION)


class ProposeOfferUseCase:
    """
    Envía una oferta, una contraoferta o una reapertura tras un rechazo.

    El tipo de oferta se deduce del historial: el comprador abre con una
    oferta inicial, reabre tras un rechazo y contraoferta ante una oferta del
    vendedor; el vendedor solo puede contraofertar.
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
    ) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo
        self._listing_repo = listing_repo
        self._id_generator = id_generator
        self._clock = clock
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, principal: Principal | None, conversation_id: str, amount: Decimal) -> Message:
        principal = require_principal(principal)
        if amount is None or amount <= 0:
            raise ValidationError("amount", "le montant doit être positif")

        conversation = await load_conversation(self._conversation_repo, principal, conversation_id)
        history = await self._message_repo.list_for_conversation(conversation_id)

        mode = composer_mode(history, conversation, principal.id)
        if mode not in ALLOWED_MODES:
            raise OfferConflictError(f"Impossible d'envoyer une offre (mode {mode.value})")

        meta = next_offer_meta(history, conversation, principal.id)
        listing = await self._listing_repo.get(conversation.listing_kind, conversation.listing_id)
        currency = listing.currency_code if listing else DEFAULT_CURRENCY

        message = Message(
            id=self._id_generator.new_id(),
            conversation_id=conversation_id,
            sender_id=principal.id,
            type=MessageType.OFFER,
            content=offer_content(amount, meta, currency),
            price=amount,
            meta=meta.to_dict(),
            created_at=self._clock.now(),
        )
        await append_message(
            self._transaction_manager, self._message_repo, self._conversation_repo, self._notifier, message
        )

        self._logger.info(
            "Offer sent",
            extra={
                "conversation_id": conversation_id,
                "message_id": message.id,
                "offer_kind": type(meta).__name__,
            },
        )
        return message
