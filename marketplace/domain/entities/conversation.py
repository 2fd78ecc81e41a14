"""Entidad Conversation - hilo entre comprador y vendedor sobre un anuncio."""

from dataclasses import dataclass
from datetime import datetime

from marketplace.domain.entities.listing import ListingKind


@dataclass
class Conversation:
    """
    Conversación única por (listing_id, listing_kind, buyer_id, seller_id).
    """

    id: str
    listing_id: str
    listing_kind: ListingKind
    buyer_id: str
    seller_id: str
    last_message_at: datetime | None = None
    created_at: datetime | None = None

    def is_participant(self, principal_id: str) -> bool:
        return principal_id in (self.buyer_id, self.seller_id)

    def is_buyer(self, principal_id: str) -> bool:
        return principal_id == self.buyer_id

    def is_seller(self, principal_id: str) -> bool:
        return principal_id == self.seller_id

    def counterpart_of(self, principal_id: str) -> str:
        return self.seller_id if principal_id == self.buyer_id else self.buyer_id
