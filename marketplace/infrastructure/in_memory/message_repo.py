"""Implementación in-memory del repositorio de mensajes."""

from copy import deepcopy
from datetime import datetime
from typing import Sequence

from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.domain.entities.message import Message, MessageType
from marketplace.domain.errors import CheckViolationError, UniqueViolationError

TYPED_RESPONSES = (MessageType.OFFER_ACCEPT, MessageType.OFFER_REJECT)


class InMemoryMessageRepo(MessageRepo):
    """
    Mensajes en orden de inserción (estable por created_at).

    ``reject_typed_responses`` simula un backend cuya restricción CHECK no
    admite los tipos offer_accept / offer_reject.
    """

    def __init__(self, reject_typed_responses: bool = False) -> None:
        self._messages: list[Message] = []
        self.reject_typed_responses = reject_typed_responses

    async def create(self, message: Message) -> None:
        if self.reject_typed_responses and message.type in TYPED_RESPONSES:
            raise CheckViolationError("messages", f"type={message.type.value}")
        responded = message.responded_offer_id
        if responded and any(m.responded_offer_id == responded for m in self._messages):
            raise UniqueViolationError("messages", f"responds_to={responded}")
        self._messages.append(deepcopy(message))

    async def get(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return deepcopy(message)
        return None

    async def list_for_conversation(
        self,
        conversation_id: str,
        limit: int | None = None,
        before: datetime | None = None,
    ) -> Sequence[Message]:
        rows = sorted(
            (m for m in self._messages if m.conversation_id == conversation_id),
            key=lambda m: m.created_at,
        )
        if before is not None:
            rows = [m for m in rows if m.created_at < before]
            if limit is not None:
                rows = rows[-limit:]
        elif limit is not None:
            rows = rows[:limit]
        return [deepcopy(m) for m in rows]

    async def latest_for_conversations(self, conversation_ids: Sequence[str]) -> dict[str, Message]:
        wanted = set(conversation_ids)
        latest: dict[str, Message] = {}
        for message in sorted(self._messages, key=lambda m: m.created_at):
            if message.conversation_id in wanted:
                latest[message.conversation_id] = deepcopy(message)
        return latest

    def clear(self) -> None:
        self._messages.clear()
