import logging

from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import IdGenerator
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import load_listing, require_principal
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import NotAllowedError, UniqueViolationError


class EnsureConversationUseCase:
    """
    Retorna la conversación comprador/vendedor de un anuncio, creándola si falta.

    Dos llamadas concurrentes producen una sola fila: quien pierde la
    inserción lee la fila ganadora.
    """

    def __init__(
        self,
        listing_repo: ListingRepo,
        conversation_repo: ConversationRepo,
        id_generator: IdGenerator,
        clock: Clock,
        transaction_manager: TransactionManager,
    ) -> None:
        self._listing_repo = listing_repo
        self._conversation_repo = conversation_repo
        self._id_generator = id_generator
        self._clock = clock
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal | None,
        kind: ListingKind,
        listing_id: str,
    ) -> Conversation:
        principal = require_principal(principal)
        listing = await load_listing(self._listing_repo, kind, listing_id)
        if listing.is_owned_by(principal.id):
            raise NotAllowedError("ouvrir une conversation", "vous êtes le propriétaire de l'annonce")

        key = dict(
            listing_id=listing_id,
            listing_kind=kind,
            buyer_id=principal.id,
            seller_id=listing.owner_id,
        )
        existing = await self._conversation_repo.find(**key)
        if existing is not None:
            return existing

        now = self._clock.now()
        conversation = Conversation(
            id=self._id_generator.new_id(),
            last_message_at=now,
            created_at=now,
            **key,
        )
        try:
            async with self._transaction_manager.start():
                await self._conversation_repo.create(conversation)
        except UniqueViolationError:
            self._logger.info(
                "Conversation created concurrently, reading existing row",
                extra={"listing_id": listing_id, "buyer_id": principal.id},
            )
            winner = await self._conversation_repo.find(**key)
            if winner is None:
                raise
            return winner

        self._logger.info(
            "Conversation created",
            extra={"conversation_id": conversation.id, "listing_id": listing_id},
        )
        return conversation
