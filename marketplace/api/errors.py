"""Traducción de errores de dominio a respuestas HTTP."""

from fastapi import status

from marketplace.domain.errors import (
    AuthenticationRequiredError,
    AvailabilityUnavailableError,
    CancellationNotAllowedError,
    CheckViolationError,
    ConcurrentModificationError,
    ConversationNotFoundError,
    DatesUnavailableError,
    DomainError,
    IdempotencyConflictError,
    InvalidDateRangeError,
    InvalidMoneyError,
    InvalidReservationStatusError,
    ListingNotFoundError,
    MessageNotFoundError,
    NotAllowedError,
    OfferConflictError,
    ReservationCodeExhaustedError,
    ReservationNotFoundError,
    ReservationWindowClosedError,
    UniqueViolationError,
    ValidationError,
)

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidDateRangeError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidMoneyError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    CheckViolationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    NotAllowedError: status.HTTP_403_FORBIDDEN,
    ListingNotFoundError: status.HTTP_404_NOT_FOUND,
    ReservationNotFoundError: status.HTTP_404_NOT_FOUND,
    ConversationNotFoundError: status.HTTP_404_NOT_FOUND,
    MessageNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidReservationStatusError: status.HTTP_409_CONFLICT,
    CancellationNotAllowedError: status.HTTP_409_CONFLICT,
    DatesUnavailableError: status.HTTP_409_CONFLICT,
    OfferConflictError: status.HTTP_409_CONFLICT,
    ReservationWindowClosedError: status.HTTP_409_CONFLICT,
    IdempotencyConflictError: status.HTTP_409_CONFLICT,
    UniqueViolationError: status.HTTP_409_CONFLICT,
    ConcurrentModificationError: status.HTTP_409_CONFLICT,
    AvailabilityUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ReservationCodeExhaustedError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_400_BAD_REQUEST
