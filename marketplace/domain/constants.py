"""Constantes del dominio."""

RESERVATION_STATUS_PENDING = "pending"
RESERVATION_STATUS_CONFIRMED = "confirmed"
RESERVATION_STATUS_CANCELLED = "cancelled"
RESERVATION_STATUS_COMPLETED = "completed"

# Estados que bloquean el calendario y cuentan para ingresos
OCCUPYING_STATUSES = (RESERVATION_STATUS_CONFIRMED, RESERVATION_STATUS_COMPLETED)

TRANSACTION_STATUS_PENDING = "pending"
TRANSACTION_STATUS_PAID = "paid"
TRANSACTION_STATUS_FAILED = "failed"
TRANSACTION_STATUS_REFUNDED = "refunded"

CANCELLATION_WINDOW_HOURS = 24
OFFER_RESERVATION_WINDOW_HOURS = 48
OFFER_WARNING_HOURS = 24

RESERVATION_CODE_PREFIX = "TG"
RESERVATION_CODE_MAX_ATTEMPTS = 5

AVAILABILITY_HORIZON_MONTHS = 18

DEFAULT_CURRENCY = "XOF"

# Sugerencias cuando el anuncio no tiene precio base
DEFAULT_OFFER_SUGGESTIONS = (45, 48, 50, 55)
