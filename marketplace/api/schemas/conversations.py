from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, constr

from marketplace.api.schemas.common import Money, MoneyModel
from marketplace.application.dtos.conversation_dto import ConversationSummaryDTO, NegotiationStateDTO
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.message import Message


class EnsureConversationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    listing_kind: ListingKind
    listing_id: constr(strip_whitespace=True, min_length=1)


class ConversationResponse(BaseModel):
    id: str
    listing_id: str
    listing_kind: str
    buyer_id: str
    seller_id: str
    last_message_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, conversation: Conversation) -> "ConversationResponse":
        return cls(
            id=conversation.id,
            listing_id=conversation.listing_id,
            listing_kind=conversation.listing_kind.value,
            buyer_id=conversation.buyer_id,
            seller_id=conversation.seller_id,
            last_message_at=conversation.last_message_at,
            created_at=conversation.created_at,
        )


class ConversationSummaryResponse(BaseModel):
    conversation: ConversationResponse
    role: str
    counterpart_id: str
    last_message_preview: str

    @classmethod
    def from_dto(cls, dto: ConversationSummaryDTO) -> "ConversationSummaryResponse":
        return cls(
            conversation=ConversationResponse.from_domain(dto.conversation),
            role=dto.role,
            counterpart_id=dto.counterpart_id,
            last_message_preview=dto.last_message_preview,
        )


class MessageResponse(MoneyModel):
    id: str
    conversation_id: str
    sender_id: str
    type: str
    content: str | None = None
    price: Decimal | None = None
    meta: dict[str, Any] | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            type=message.type.value,
            content=message.content,
            price=message.price,
            meta=message.meta,
            created_at=message.created_at,
        )


class SendTextRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content: str


class ProposeOfferRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Money


class ReservationWindowResponse(BaseModel):
    accept_message_id: str
    deadline: datetime
    remaining_seconds: int
    can_reserve: bool
    warning: bool


class NegotiationStateResponse(MoneyModel):
    conversation_id: str
    role: str
    composer_mode: str
    latest_offer: MessageResponse | None = None
    open_offer: MessageResponse | None = None
    acceptance: MessageResponse | None = None
    window: ReservationWindowResponse | None = None
    suggestions: list[int]

    @classmethod
    def from_dto(cls, dto: NegotiationStateDTO) -> "NegotiationStateResponse":
        window = None
        if dto.window is not None:
            window = ReservationWindowResponse(
                accept_message_id=dto.window.accept_message_id,
                deadline=dto.window.deadline,
                remaining_seconds=int(dto.window.remaining.total_seconds()),
                can_reserve=dto.window.can_reserve,
                warning=dto.window.warning,
            )
        return cls(
            conversation_id=dto.conversation_id,
            role=dto.role,
            composer_mode=dto.composer_mode.value,
            latest_offer=MessageResponse.from_domain(dto.latest_offer) if dto.latest_offer else None,
            open_offer=MessageResponse.from_domain(dto.open_offer) if dto.open_offer else None,
            acceptance=MessageResponse.from_domain(dto.acceptance) if dto.acceptance else None,
            window=window,
            suggestions=list(dto.suggestions),
        )
