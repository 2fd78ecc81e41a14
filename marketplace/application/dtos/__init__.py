"""Data Transfer Objects de la capa de aplicación."""

from marketplace.application.dtos.booking_dto import BookingResultDTO, CreateBookingDTO
from marketplace.application.dtos.conversation_dto import ConversationSummaryDTO, NegotiationStateDTO
from marketplace.application.dtos.reservation_dto import ReservationDetailsDTO

__all__ = [
    "CreateBookingDTO",
    "BookingResultDTO",
    "ConversationSummaryDTO",
    "NegotiationStateDTO",
    "ReservationDetailsDTO",
]
