"""DTOs para el detalle de reservaciones."""

from dataclasses import dataclass, field

from marketplace.domain.entities.principal import UserProfile
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.entities.transaction import Transaction


@dataclass
class ReservationDetailsDTO:
    """
    Detalle de una reservación para el comprador o el propietario.

    El contacto de la contraparte solo se llena cuando la reservación está
    confirmada y la última transacción está pagada.
    """

    reservation: Reservation
    role: str
    latest_transaction: Transaction | None = None
    transactions: list[Transaction] = field(default_factory=list)
    counterpart: UserProfile | None = None
    contact_visible: bool = False
    can_confirm: bool = False
    can_cancel: bool = False
    can_confirm_cash: bool = False
    can_confirm_arrival: bool = False
