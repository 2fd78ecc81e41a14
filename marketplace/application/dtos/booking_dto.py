"""DTOs para el checkout de reservas."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.transaction import PaymentMethod


@dataclass
class CreateBookingDTO:
    """Datos de entrada del checkout."""

    listing_kind: ListingKind
    listing_id: str
    start_date: date
    end_date: date | None = None
    guests_count: int = 1
    add_on_ids: list[str] = field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.SERVICE_FEE_ONLY
    negotiated_from_offer_id: str | None = None

    @property
    def effective_end(self) -> date:
        """Sin fecha de salida la reserva es de un solo día."""
        return self.end_date or self.start_date

    def fingerprint(self) -> dict[str, Any]:
        return {
            "listing_kind": self.listing_kind.value,
            "listing_id": self.listing_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.effective_end.isoformat(),
            "guests_count": self.guests_count,
            "add_on_ids": sorted(self.add_on_ids),
            "payment_method": self.payment_method.value,
            "negotiated_from_offer_id": self.negotiated_from_offer_id,
        }


@dataclass
class BookingResultDTO:
    """Resultado del checkout (también se guarda para replays idempotentes)."""

    reservation_id: str
    reservation_code: str
    transaction_id: str
    status: str
    units: int
    unit_price: Decimal
    total_price: Decimal
    commission: Decimal
    price_espece: Decimal
    amount_paid_online: Decimal
    currency_code: str
    source_offer_message_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "reservation_id": self.reservation_id,
            "reservation_code": self.reservation_code,
            "transaction_id": self.transaction_id,
            "status": self.status,
            "units": self.units,
            "unit_price": str(self.unit_price),
            "total_price": str(self.total_price),
            "commission": str(self.commission),
            "price_espece": str(self.price_espece),
            "amount_paid_online": str(self.amount_paid_online),
            "currency_code": self.currency_code,
            "source_offer_message_id": self.source_offer_message_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BookingResultDTO":
        return cls(
            reservation_id=data["reservation_id"],
            reservation_code=data["reservation_code"],
            transaction_id=data["transaction_id"],
            status=data["status"],
            units=int(data["units"]),
            unit_price=Decimal(data["unit_price"]),
            total_price=Decimal(data["total_price"]),
            commission=Decimal(data["commission"]),
            price_espece=Decimal(data["price_espece"]),
            amount_paid_online=Decimal(data["amount_paid_online"]),
            currency_code=data["currency_code"],
            source_offer_message_id=data.get("source_offer_message_id"),
        )
