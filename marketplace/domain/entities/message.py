"""Entidad Message - unidad del protocolo de ofertas."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from marketplace.domain.value_objects.offer_meta import (
    ACTION_OFFER_ACCEPT,
    ACTION_OFFER_REJECT,
    OfferMeta,
    parse_offer_meta,
)


class MessageType(str, Enum):
    """Tipos de mensaje."""

    TEXT = "text"
    OFFER = "offer"
    OFFER_ACCEPT = "offer_accept"
    OFFER_REJECT = "offer_reject"
    SYSTEM = "system"


@dataclass
class Message:
    """
    Mensaje de una conversación. Solo se agregan; nunca se editan ni borran.
    """

    id: str
    conversation_id: str
    sender_id: str
    type: MessageType
    content: str | None = None
    price: Decimal | None = None
    meta: dict[str, Any] | None = None
    created_at: datetime | None = None

    @property
    def offer_meta(self) -> OfferMeta | None:
        return parse_offer_meta(self.meta)

    @property
    def is_offer(self) -> bool:
        return self.type == MessageType.OFFER

    @property
    def responded_offer_id(self) -> str | None:
        """Oferta a la que responde un mensaje de aceptación o rechazo."""
        if not self.meta:
            return None
        return self.meta.get("accepted_from") or self.meta.get("rejected_from")


def is_accept_msg(message: Message | None) -> bool:
    """``offer_accept`` y ``system{action=offer_accept}`` son equivalentes."""
    if message is None:
        return False
    if message.type == MessageType.OFFER_ACCEPT:
        return True
    return message.type == MessageType.SYSTEM and (message.meta or {}).get("action") == ACTION_OFFER_ACCEPT


def is_reject_msg(message: Message | None) -> bool:
    """``offer_reject`` y ``system{action=offer_reject}`` son equivalentes."""
    if message is None:
        return False
    if message.type == MessageType.OFFER_REJECT:
        return True
    return message.type == MessageType.SYSTEM and (message.meta or {}).get("action") == ACTION_OFFER_REJECT
