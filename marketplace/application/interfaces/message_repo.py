from datetime import datetime
from typing import Sequence

from marketplace.domain.entities.message import Message


class MessageRepo:
    async def create(self, message: Message) -> None:
        """
        Lanza CheckViolationError si el backend rechaza el tipo del mensaje y
        UniqueViolationError si la oferta ya tiene una respuesta.
        """
        raise NotImplementedError

    async def get(self, message_id: str) -> Message | None:
        raise NotImplementedError

    async def list_for_conversation(
        self,
        conversation_id: str,
        limit: int | None = None,
        before: datetime | None = None,
    ) -> Sequence[Message]:
        """
        Mensajes en orden ascendente por created_at (empates por orden de inserción).

        Con ``before`` retorna la página de los ``limit`` mensajes más
        recientes anteriores a esa fecha, también en orden ascendente.
        """
        raise NotImplementedError

    async def latest_for_conversations(self, conversation_ids: Sequence[str]) -> dict[str, Message]:
        raise NotImplementedError
