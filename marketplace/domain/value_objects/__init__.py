"""Value Objects del dominio del marketplace."""

from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.offer_meta import (
    ACTION_OFFER_ACCEPT,
    ACTION_OFFER_REJECT,
    AcceptedOffer,
    CounterOffer,
    InitialOffer,
    OfferMeta,
    RejectedOffer,
    ReopenedOffer,
    SystemAction,
    parse_offer_meta,
)
from marketplace.domain.value_objects.reservation_code import ReservationCode
from marketplace.domain.value_objects.stay_range import StayRange

__all__ = [
    "Money",
    "ReservationCode",
    "StayRange",
    "OfferMeta",
    "InitialOffer",
    "CounterOffer",
    "ReopenedOffer",
    "AcceptedOffer",
    "RejectedOffer",
    "SystemAction",
    "ACTION_OFFER_ACCEPT",
    "ACTION_OFFER_REJECT",
    "parse_offer_meta",
]
