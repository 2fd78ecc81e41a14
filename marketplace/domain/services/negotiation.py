"""
Máquina de estados de negociación.

Funciones puras sobre el historial de mensajes de una conversación: qué
oferta sigue abierta, qué puede escribir cada participante, la ventana de
48 h posterior a una aceptación y la fusión de mensajes recibidos en tiempo
real.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Sequence

from marketplace.domain.constants import (
    DEFAULT_OFFER_SUGGESTIONS,
    OFFER_RESERVATION_WINDOW_HOURS,
    OFFER_WARNING_HOURS,
)
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.message import Message, MessageType, is_accept_msg, is_reject_msg
from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.offer_meta import (
    CounterOffer,
    InitialOffer,
    OfferMeta,
    ReopenedOffer,
)

PREVIEW_LENGTH = 120


class ComposerMode(str, Enum):
    """Lo que el participante puede enviar como oferta."""

    HIDDEN = "hidden"
    INITIAL = "initial"
    NEGOTIATION = "negotiation"
    AWAITING_RESPONSE = "awaiting_response"
    CLOSED = "closed"


@dataclass(frozen=True)
class ReservationWindow:
    """
    Ventana de reserva abierta por una aceptación.

    Attributes:
        accept_message_id: Mensaje de aceptación que abrió la ventana.
        deadline: created_at de la aceptación + 48 h.
        remaining: Tiempo restante (nunca negativo).
        can_reserve: True mientras remaining > 0.
        warning: True durante las últimas 24 h de la ventana.
    """

    accept_message_id: str
    deadline: datetime
    remaining: timedelta
    can_reserve: bool
    warning: bool


def remaining(now: datetime, deadline: datetime) -> timedelta:
    return max(deadline - now, timedelta(0))


def reservation_window(
    accept_message: Message,
    now: datetime,
    window_hours: int = OFFER_RESERVATION_WINDOW_HOURS,
    warning_hours: int = OFFER_WARNING_HOURS,
) -> ReservationWindow:
    """Calcula la ventana a partir del created_at persistido de la aceptación."""
    deadline = accept_message.created_at + timedelta(hours=window_hours)
    left = remaining(now, deadline)
    open_ = left > timedelta(0)
    return ReservationWindow(
        accept_message_id=accept_message.id,
        deadline=deadline,
        remaining=left,
        can_reserve=open_,
        warning=open_ and left <= timedelta(hours=warning_hours),
    )


def latest_offer(messages: Sequence[Message]) -> Message | None:
    for message in reversed(messages):
        if message.type == MessageType.OFFER:
            return message
    return None


def latest_acceptance(messages: Sequence[Message]) -> Message | None:
    for message in reversed(messages):
        if is_accept_msg(message):
            return message
    return None


def latest_rejection(messages: Sequence[Message]) -> Message | None:
    for message in reversed(messages):
        if is_reject_msg(message):
            return message
    return None


def is_answered(offer: Message, messages: Iterable[Message]) -> bool:
    return any(
        (is_accept_msg(m) or is_reject_msg(m)) and m.responded_offer_id == offer.id
        for m in messages
    )


def latest_unanswered_offer(messages: Sequence[Message]) -> Message | None:
    """
    La última oferta de la conversación si nadie la ha respondido.

    Una oferta anterior a la última queda superada aunque no tenga respuesta.
    """
    offer = latest_offer(messages)
    if offer is None or is_answered(offer, messages):
        return None
    return offer


def composer_mode(
    messages: Sequence[Message],
    conversation: Conversation,
    principal_id: str,
) -> ComposerMode:
    """
    Modo del compositor de ofertas para un participante.

    Comprador: inicial sin ofertas propias; en espera mientras su oferta no
    tenga respuesta; negociación tras un rechazo o ante una contraoferta;
    cerrado para siempre tras una aceptación. Vendedor: solo contraofertas
    sobre una oferta abierta del comprador.
    """
    if not conversation.is_participant(principal_id):
        return ComposerMode.HIDDEN
    if latest_acceptance(messages) is not None:
        return ComposerMode.CLOSED

    open_offer = latest_unanswered_offer(messages)

    if conversation.is_seller(principal_id):
        if open_offer is not None and open_offer.sender_id == conversation.buyer_id:
            return ComposerMode.NEGOTIATION
        return ComposerMode.HIDDEN

    if open_offer is not None:
        if open_offer.sender_id == principal_id:
            return ComposerMode.AWAITING_RESPONSE
        return ComposerMode.NEGOTIATION

    has_my_offer = any(m.type == MessageType.OFFER and m.sender_id == principal_id for m in messages)
    if not has_my_offer:
        return ComposerMode.INITIAL
    return ComposerMode.NEGOTIATION


def next_offer_meta(
    messages: Sequence[Message],
    conversation: Conversation,
    principal_id: str,
) -> OfferMeta:
    """
    Metadatos de la próxima oferta según el estado de la negociación.

    Reapertura tras un rechazo: apunta a la oferta original que se rechazó.
    """
    open_offer = latest_unanswered_offer(messages)
    if open_offer is not None:
        return CounterOffer(countered_from=open_offer.id)

    rejection = latest_rejection(messages)
    if conversation.is_buyer(principal_id) and rejection is not None:
        return ReopenedOffer(reopened_from=rejection.responded_offer_id)

    return InitialOffer()


def offer_content(amount: Decimal, meta: OfferMeta, currency_code: str) -> str:
    price = Money(amount=amount, currency_code=currency_code)
    if isinstance(meta, ReopenedOffer):
        return f"Je négocie pour {price}"
    return f"Je propose {price}"


def suggest_offer_prices(base_price: Decimal | None) -> list[int]:
    """90 %, 95 %, 100 % y 110 % del precio base, redondeados."""
    if not base_price or base_price <= 0:
        return list(DEFAULT_OFFER_SUGGESTIONS)
    factors = (Decimal("0.9"), Decimal("0.95"), Decimal("1"), Decimal("1.1"))
    return [int((base_price * f).quantize(Decimal("1"), rounding=ROUND_HALF_UP)) for f in factors]


def merge_messages(existing: Sequence[Message], incoming: Iterable[Message]) -> list[Message]:
    """
    Fusiona mensajes empujados en tiempo real con el historial local.

    Descarta duplicados por id y mantiene el orden por created_at.
    """
    seen = {m.id for m in existing}
    merged = list(existing)
    for message in incoming:
        if message.id in seen:
            continue
        seen.add(message.id)
        merged.append(message)
    return sorted(merged, key=lambda m: m.created_at)


def message_preview(message: Message, currency_code: str = "XOF") -> str:
    price = Money(amount=message.price, currency_code=currency_code) if message.price else None
    if message.type == MessageType.OFFER:
        return f"Proposition • {price or ''}".strip()
    if is_accept_msg(message):
        return f"✅ Offre acceptée {f'({price})' if price else ''}".strip()
    if is_reject_msg(message):
        return "❌ Offre refusée"
    return (message.content or "")[:PREVIEW_LENGTH]
