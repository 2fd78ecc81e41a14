from datetime import datetime
from typing import Sequence

from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind


class ConversationRepo:
    async def get(self, conversation_id: str) -> Conversation | None:
        raise NotImplementedError

    async def find(
        self,
        listing_id: str,
        listing_kind: ListingKind,
        buyer_id: str,
        seller_id: str,
    ) -> Conversation | None:
        raise NotImplementedError

    async def create(self, conversation: Conversation) -> None:
        """Lanza UniqueViolationError si ya existe la tupla (listing, kind, buyer, seller)."""
        raise NotImplementedError

    async def list_for_participant(self, principal_id: str) -> Sequence[Conversation]:
        """Conversaciones del participante, la más reciente primero."""
        raise NotImplementedError

    async def touch(self, conversation_id: str, last_message_at: datetime) -> None:
        raise NotImplementedError
