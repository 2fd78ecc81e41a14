"""Implementación in-memory del repositorio de conversaciones."""

from copy import deepcopy
from datetime import datetime
from typing import Sequence

from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.errors import UniqueViolationError


def _key(listing_id: str, listing_kind: ListingKind, buyer_id: str, seller_id: str) -> tuple[str, str, str, str]:
    return (listing_id, listing_kind.value, buyer_id, seller_id)


class InMemoryConversationRepo(ConversationRepo):
    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._by_key: dict[tuple[str, str, str, str], str] = {}

    async def get(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        return deepcopy(conversation) if conversation else None

    async def find(
        self,
        listing_id: str,
        listing_kind: ListingKind,
        buyer_id: str,
        seller_id: str,
    ) -> Conversation | None:
        conversation_id = self._by_key.get(_key(listing_id, listing_kind, buyer_id, seller_id))
        return await self.get(conversation_id) if conversation_id else None

    async def create(self, conversation: Conversation) -> None:
        key = _key(conversation.listing_id, conversation.listing_kind, conversation.buyer_id, conversation.seller_id)
        if key in self._by_key:
            raise UniqueViolationError("conversations", "listing_id, listing_kind, buyer_id, seller_id")
        self._by_key[key] = conversation.id
        self._conversations[conversation.id] = deepcopy(conversation)

    async def list_for_participant(self, principal_id: str) -> Sequence[Conversation]:
        mine = [deepcopy(c) for c in self._conversations.values() if c.is_participant(principal_id)]
        return sorted(mine, key=lambda c: c.last_message_at or c.created_at, reverse=True)

    async def touch(self, conversation_id: str, last_message_at: datetime) -> None:
        conversation = self._conversations.get(conversation_id)
        if conversation is not None:
            conversation.last_message_at = last_message_at

    def clear(self) -> None:
        self._conversations.clear()
        self._by_key.clear()
