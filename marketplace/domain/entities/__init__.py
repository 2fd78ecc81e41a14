"""Entidades del dominio del marketplace."""

from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import (
    AddOn,
    Listing,
    ListingKind,
    PricingModel,
    RentalUnit,
)
from marketplace.domain.entities.message import (
    Message,
    MessageType,
    is_accept_msg,
    is_reject_msg,
)
from marketplace.domain.entities.principal import Principal, UserProfile
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.entities.transaction import (
    PaymentMethod,
    Transaction,
    TransactionStatus,
)

__all__ = [
    # Listing
    "Listing",
    "ListingKind",
    "RentalUnit",
    "AddOn",
    "PricingModel",
    "AvailabilityOverride",
    # Reservation
    "Reservation",
    "ReservationStatus",
    "Transaction",
    "TransactionStatus",
    "PaymentMethod",
    # Chat
    "Conversation",
    "Message",
    "MessageType",
    "is_accept_msg",
    "is_reject_msg",
    # Identity
    "Principal",
    "UserProfile",
]
