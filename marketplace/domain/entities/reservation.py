"""Entidad Reservation - Agregado raíz de una reserva."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.errors import InvalidReservationStatusError
from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.stay_range import StayRange


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    Representa la reserva de un anuncio por un comprador, con el precio
    unitario congelado en el momento de la reserva (posiblemente negociado) y
    los indicadores de liquidación fuera de la app (efectivo, llegada).
    """

    # Identificadores
    id: str
    reservation_code: str
    listing_kind: ListingKind
    listing_id: str
    user_id: str

    # Fechas (end exclusiva para ocupación)
    start_date: date
    end_date: date

    # Financieros
    unit_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    price_espece: Decimal = Decimal("0")
    currency_code: str = "XOF"

    # Estado
    status: ReservationStatus = ReservationStatus.PENDING
    arrival_confirmation: bool = False
    espece_confirmation: bool = False

    # Detalle de la estancia
    guests_count: int = 1
    guest_info: dict[str, Any] = field(default_factory=dict)

    # Oferta aceptada que fijó el precio negociado (si aplica)
    source_offer_message_id: str | None = None

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    confirmed_at: datetime | None = None

    # === Propiedades calculadas ===

    @property
    def stay_range(self) -> StayRange:
        return StayRange(start=self.start_date, end=self.end_date)

    @property
    def total(self) -> Money:
        return Money(amount=self.total_price, currency_code=self.currency_code)

    @property
    def net_amount(self) -> Decimal:
        """Ingreso neto del propietario: total menos comisión."""
        return self.total_price - self.commission

    @property
    def is_confirmed(self) -> bool:
        """Confirmada por el propietario (o ya completada)."""
        return self.status in (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)

    @property
    def is_closed(self) -> bool:
        return self.status in (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED)

    @property
    def cash_due(self) -> bool:
        return self.price_espece > 0

    @property
    def cancellation_anchor(self) -> datetime | None:
        """Instante desde el que corre la ventana de cancelación."""
        return self.confirmed_at or self.created_at

    # === Métodos de negocio ===

    def confirm(self, confirmed_at: datetime) -> None:
        """pending -> confirmed; arranca la ventana de 24 h."""
        if self.status != ReservationStatus.PENDING:
            raise InvalidReservationStatusError(
                self.status.value, ReservationStatus.PENDING.value, "confirmer la réservation"
            )
        self.status = ReservationStatus.CONFIRMED
        self.confirmed_at = confirmed_at
        self.lock_version += 1

    def cancel(self) -> None:
        self.status = ReservationStatus.CANCELLED
        self.lock_version += 1

    def mark_cash_confirmed(self) -> None:
        """Solo marca el efectivo como recibido; no toca estado ni transacciones."""
        self.espece_confirmation = True
        self.lock_version += 1

    def confirm_arrival(self) -> None:
        self.arrival_confirmation = True
        self.lock_version += 1
