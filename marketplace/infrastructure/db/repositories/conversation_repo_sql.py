from datetime import datetime
from typing import Sequence

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.infrastructure.db.converters import as_utc
from marketplace.infrastructure.db.integrity import guarded_write
from marketplace.infrastructure.db.tables import conversations


def _to_entity(row) -> Conversation:
    return Conversation(
        id=row["id"],
        listing_id=row["listing_id"],
        listing_kind=ListingKind(row["listing_kind"]),
        buyer_id=row["buyer_id"],
        seller_id=row["seller_id"],
        last_message_at=as_utc(row["last_message_at"]),
        created_at=as_utc(row["created_at"]),
    )


class ConversationRepoSQL(ConversationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, conversation_id: str) -> Conversation | None:
        result = await self._session.execute(
            select(conversations).where(conversations.c.id == conversation_id).limit(1)
        )
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def find(
        self,
        listing_id: str,
        listing_kind: ListingKind,
        buyer_id: str,
        seller_id: str,
    ) -> Conversation | None:
        stmt = select(conversations).where(
            conversations.c.listing_id == listing_id,
            conversations.c.listing_kind == listing_kind.value,
            conversations.c.buyer_id == buyer_id,
            conversations.c.seller_id == seller_id,
        )
        result = await self._session.execute(stmt.limit(1))
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def create(self, conversation: Conversation) -> None:
        async with guarded_write(self._session, "conversations"):
            await self._session.execute(
                insert(conversations).values(
                    id=conversation.id,
                    listing_id=conversation.listing_id,
                    listing_kind=conversation.listing_kind.value,
                    buyer_id=conversation.buyer_id,
                    seller_id=conversation.seller_id,
                    last_message_at=conversation.last_message_at,
                    created_at=conversation.created_at,
                )
            )

    async def list_for_participant(self, principal_id: str) -> Sequence[Conversation]:
        stmt = (
            select(conversations)
            .where(or_(conversations.c.buyer_id == principal_id, conversations.c.seller_id == principal_id))
            .order_by(func.coalesce(conversations.c.last_message_at, conversations.c.created_at).desc())
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings()]

    async def touch(self, conversation_id: str, last_message_at: datetime) -> None:
        await self._session.execute(
            update(conversations)
            .where(conversations.c.id == conversation_id)
            .values(last_message_at=last_message_at)
        )
