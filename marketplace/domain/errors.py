"""Excepciones de dominio para el marketplace de alquileres."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Champ '{field}' invalide: {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


class InvalidDateRangeError(DomainError):
    """Rango de fechas inválido."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_DATE_RANGE")


class InvalidMoneyError(DomainError):
    """Monto monetario inválido."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_MONEY")


# === Errores de Identidad y Autorización ===


class AuthenticationRequiredError(DomainError):
    """No hay un principal autenticado para la operación."""

    def __init__(self):
        super().__init__(message="Connexion requise", code="AUTHENTICATION_REQUIRED")


class NotAllowedError(DomainError):
    """El principal no tiene permiso para la operación."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Impossible de {operation}: {reason}",
            code="NOT_ALLOWED",
        )
        self.operation = operation
        self.reason = reason


# === Errores de Recursos ===


class ListingNotFoundError(DomainError):
    """El anuncio no existe."""

    def __init__(self, listing_kind: str, listing_id: str):
        super().__init__(
            message=f"Annonce introuvable: {listing_kind}/{listing_id}",
            code="LISTING_NOT_FOUND",
        )
        self.listing_kind = listing_kind
        self.listing_id = listing_id


class ReservationNotFoundError(DomainError):
    """La reservación no existe."""

    def __init__(self, reservation_id: str):
        super().__init__(
            message=f"Réservation introuvable: {reservation_id}",
            code="RESERVATION_NOT_FOUND",
        )
        self.reservation_id = reservation_id


class ConversationNotFoundError(DomainError):
    """La conversación no existe."""

    def __init__(self, conversation_id: str):
        super().__init__(
            message=f"Conversation introuvable: {conversation_id}",
            code="CONVERSATION_NOT_FOUND",
        )
        self.conversation_id = conversation_id


class MessageNotFoundError(DomainError):
    """El mensaje no existe en la conversación."""

    def __init__(self, message_id: str):
        super().__init__(
            message=f"Message introuvable: {message_id}",
            code="MESSAGE_NOT_FOUND",
        )
        self.message_id = message_id


# === Errores de Reservación ===


class InvalidReservationStatusError(DomainError):
    """El estado de la reservación no permite la operación."""

    def __init__(self, current_status: str, expected_status: str | list[str], operation: str):
        expected = expected_status if isinstance(expected_status, str) else ", ".join(expected_status)
        super().__init__(
            message=f"Impossible de {operation}: statut actuel '{current_status}', attendu '{expected}'",
            code="INVALID_RESERVATION_STATUS",
        )
        self.current_status = current_status
        self.expected_status = expected_status
        self.operation = operation


class CancellationNotAllowedError(DomainError):
    """La ventana de cancelación está cerrada o la reservación ya fue liquidada."""

    def __init__(self, reservation_id: str, reason: str):
        super().__init__(
            message=f"Annulation impossible pour {reservation_id}: {reason}",
            code="CANCELLATION_NOT_ALLOWED",
        )
        self.reservation_id = reservation_id
        self.reason = reason


class DatesUnavailableError(DomainError):
    """Alguna de las fechas solicitadas no está disponible."""

    def __init__(self, dates: list[str]):
        super().__init__(
            message=f"Dates indisponibles: {', '.join(dates)}",
            code="DATES_UNAVAILABLE",
        )
        self.dates = dates


class ReservationCodeExhaustedError(DomainError):
    """No se pudo generar un código de reservación único."""

    def __init__(self, attempts: int):
        super().__init__(
            message="Impossible de générer un code de réservation unique. Réessayez.",
            code="RESERVATION_CODE_EXHAUSTED",
        )
        self.attempts = attempts


class AvailabilityUnavailableError(DomainError):
    """No se pudo calcular la disponibilidad del anuncio."""

    def __init__(self, listing_id: str):
        super().__init__(
            message=f"Disponibilités indisponibles pour l'annonce {listing_id}",
            code="AVAILABILITY_UNAVAILABLE",
        )
        self.listing_id = listing_id


# === Errores de Negociación ===


class OfferConflictError(DomainError):
    """La oferta ya no admite la transición solicitada."""

    def __init__(self, message: str):
        super().__init__(message=message, code="OFFER_CONFLICT")


class ReservationWindowClosedError(DomainError):
    """La ventana de 48 h posterior a la aceptación ya expiró."""

    def __init__(self, accept_message_id: str):
        super().__init__(
            message=f"Délai de 48 h dépassé pour l'offre acceptée {accept_message_id}",
            code="RESERVATION_WINDOW_CLOSED",
        )
        self.accept_message_id = accept_message_id


# === Errores de Idempotencia ===


class IdempotencyConflictError(DomainError):
    """Conflicto de idempotencia: mismo key pero diferente request."""

    def __init__(self, idem_key: str, scope: str):
        super().__init__(
            message=f"Clé d'idempotence '{idem_key}' ({scope}) "
            f"déjà utilisée pour une autre requête",
            code="IDEMPOTENCY_CONFLICT",
        )
        self.idem_key = idem_key
        self.scope = scope


# === Errores de Persistencia ===


class UniqueViolationError(DomainError):
    """El backend rechazó la escritura por una restricción de unicidad (23505)."""

    def __init__(self, table: str, detail: str | None = None):
        super().__init__(
            message=f"Contrainte d'unicité violée sur '{table}'" + (f": {detail}" if detail else ""),
            code="23505",
        )
        self.table = table


class CheckViolationError(DomainError):
    """El backend rechazó la escritura por una restricción CHECK (23514)."""

    def __init__(self, table: str, detail: str | None = None):
        super().__init__(
            message=f"Contrainte CHECK violée sur '{table}'" + (f": {detail}" if detail else ""),
            code="23514",
        )
        self.table = table


class ConcurrentModificationError(DomainError):
    """Otra escritura modificó la entidad entre la lectura y la actualización."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} {entity_id} modifiée par une autre opération",
            code="CONCURRENT_MODIFICATION",
        )
        self.entity = entity
        self.entity_id = entity_id
