from datetime import datetime
from typing import Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.domain.entities.message import Message, MessageType
from marketplace.infrastructure.db.converters import as_utc
from marketplace.infrastructure.db.integrity import guarded_write
from marketplace.infrastructure.db.tables import messages


def _to_entity(row) -> Message:
    return Message(
        id=row["id"],
        conversation_id=row["conversation_id"],
        sender_id=row["sender_id"],
        type=MessageType(row["type"]),
        content=row["content"],
        price=row["price"],
        meta=row["meta"],
        created_at=as_utc(row["created_at"]),
    )


class MessageRepoSQL(MessageRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> None:
        async with guarded_write(self._session, "messages"):
            await self._session.execute(
                insert(messages).values(
                    id=message.id,
                    conversation_id=message.conversation_id,
                    sender_id=message.sender_id,
                    type=message.type.value,
                    content=message.content,
                    price=message.price,
                    meta=message.meta,
                    responds_to=message.responded_offer_id,
                    created_at=message.created_at,
                )
            )

    async def get(self, message_id: str) -> Message | None:
        result = await self._session.execute(select(messages).where(messages.c.id == message_id).limit(1))
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def list_for_conversation(
        self,
        conversation_id: str,
        limit: int | None = None,
        before: datetime | None = None,
    ) -> Sequence[Message]:
        stmt = select(messages).where(messages.c.conversation_id == conversation_id)
        if before is not None:
            # página hacia atrás: los más recientes primero y luego se invierte
            stmt = stmt.where(messages.c.created_at < before).order_by(
                messages.c.created_at.desc(), messages.c.seq.desc()
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await self._session.execute(stmt)
            return [_to_entity(row) for row in reversed(result.mappings().all())]

        stmt = stmt.order_by(messages.c.created_at, messages.c.seq)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings()]

    async def latest_for_conversations(self, conversation_ids: Sequence[str]) -> dict[str, Message]:
        if not conversation_ids:
            return {}
        stmt = (
            select(messages)
            .where(messages.c.conversation_id.in_(list(conversation_ids)))
            .order_by(messages.c.created_at, messages.c.seq)
        )
        result = await self._session.execute(stmt)
        latest: dict[str, Message] = {}
        for row in result.mappings():
            latest[row["conversation_id"]] = _to_entity(row)
        return latest
