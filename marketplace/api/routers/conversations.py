from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from marketplace.api.dependencies import get_use_cases
from marketplace.api.principal import get_principal
from marketplace.api.schemas.conversations import (
    ConversationResponse,
    ConversationSummaryResponse,
    EnsureConversationRequest,
    MessageResponse,
    NegotiationStateResponse,
    ProposeOfferRequest,
    SendTextRequest,
)
from marketplace.application.use_cases.respond_to_offer import OfferDecision
from marketplace.domain.entities.principal import Principal

router = APIRouter()


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_200_OK)
async def ensure_conversation(
    payload: EnsureConversationRequest,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ConversationResponse:
    conversation = await use_cases["ensure_conversation"].execute(
        principal, payload.listing_kind, payload.listing_id
    )
    return ConversationResponse.from_domain(conversation)


@router.get("/conversations", response_model=list[ConversationSummaryResponse])
async def list_conversations(
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> list[ConversationSummaryResponse]:
    summaries = await use_cases["list_conversations"].execute(principal)
    return [ConversationSummaryResponse.from_dto(s) for s in summaries]


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
async def fetch_messages(
    conversation_id: str,
    limit: int = Query(default=100),
    before: datetime | None = Query(default=None),
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> list[MessageResponse]:
    messages = await use_cases["fetch_messages"].execute(principal, conversation_id, limit=limit, before=before)
    return [MessageResponse.from_domain(m) for m in messages]


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_text(
    conversation_id: str,
    payload: SendTextRequest,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> MessageResponse:
    message = await use_cases["send_text"].execute(principal, conversation_id, payload.content)
    return MessageResponse.from_domain(message)


@router.post(
    "/conversations/{conversation_id}/offers",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def propose_offer(
    conversation_id: str,
    payload: ProposeOfferRequest,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> MessageResponse:
    message = await use_cases["propose_offer"].execute(principal, conversation_id, payload.amount)
    return MessageResponse.from_domain(message)


async def _respond(use_cases, principal, conversation_id: str, message_id: str, decision: OfferDecision):
    message = await use_cases["respond_to_offer"].execute(principal, conversation_id, message_id, decision)
    return MessageResponse.from_domain(message)


@router.post(
    "/conversations/{conversation_id}/offers/{message_id}/accept",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def accept_offer(
    conversation_id: str,
    message_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> MessageResponse:
    return await _respond(use_cases, principal, conversation_id, message_id, OfferDecision.ACCEPT)


@router.post(
    "/conversations/{conversation_id}/offers/{message_id}/reject",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reject_offer(
    conversation_id: str,
    message_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> MessageResponse:
    return await _respond(use_cases, principal, conversation_id, message_id, OfferDecision.REJECT)


@router.get("/conversations/{conversation_id}/negotiation", response_model=NegotiationStateResponse)
async def get_negotiation_state(
    conversation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> NegotiationStateResponse:
    state = await use_cases["get_negotiation_state"].execute(principal, conversation_id)
    return NegotiationStateResponse.from_dto(state)
