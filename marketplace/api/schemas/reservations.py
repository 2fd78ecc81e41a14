from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from marketplace.api.schemas.common import MoneyModel
from marketplace.application.dtos.reservation_dto import ReservationDetailsDTO
from marketplace.domain.entities.principal import UserProfile
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.entities.transaction import Transaction


class ReservationResponse(MoneyModel):
    id: str
    reservation_code: str
    listing_kind: str
    listing_id: str
    user_id: str
    start_date: date
    end_date: date
    unit_price: Decimal
    total_price: Decimal
    commission: Decimal
    price_espece: Decimal
    currency_code: str
    status: str
    arrival_confirmation: bool
    espece_confirmation: bool
    guests_count: int
    guest_info: dict[str, Any]
    source_offer_message_id: str | None = None
    created_at: datetime | None = None
    confirmed_at: datetime | None = None

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            reservation_code=reservation.reservation_code,
            listing_kind=reservation.listing_kind.value,
            listing_id=reservation.listing_id,
            user_id=reservation.user_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            unit_price=reservation.unit_price,
            total_price=reservation.total_price,
            commission=reservation.commission,
            price_espece=reservation.price_espece,
            currency_code=reservation.currency_code,
            status=reservation.status.value,
            arrival_confirmation=reservation.arrival_confirmation,
            espece_confirmation=reservation.espece_confirmation,
            guests_count=reservation.guests_count,
            guest_info=reservation.guest_info,
            source_offer_message_id=reservation.source_offer_message_id,
            created_at=reservation.created_at,
            confirmed_at=reservation.confirmed_at,
        )


class TransactionSummary(MoneyModel):
    id: str
    amount: Decimal
    commission: Decimal
    status: str
    payment_method: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionSummary":
        return cls(
            id=transaction.id,
            amount=transaction.amount,
            commission=transaction.commission,
            status=transaction.status.value,
            payment_method=transaction.payment_method.value,
            created_at=transaction.created_at,
        )


class CounterpartSummary(BaseModel):
    id: str
    full_name: str
    email: str | None = None
    phone: str | None = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "CounterpartSummary":
        return cls(id=profile.id, full_name=profile.full_name, email=profile.email, phone=profile.phone)


class ReservationDetailsResponse(MoneyModel):
    reservation: ReservationResponse
    role: str
    latest_transaction: TransactionSummary | None = None
    transactions: list[TransactionSummary]
    counterpart: CounterpartSummary | None = None
    contact_visible: bool
    can_confirm: bool
    can_cancel: bool
    can_confirm_cash: bool
    can_confirm_arrival: bool

    @classmethod
    def from_dto(cls, dto: ReservationDetailsDTO) -> "ReservationDetailsResponse":
        return cls(
            reservation=ReservationResponse.from_domain(dto.reservation),
            role=dto.role,
            latest_transaction=(
                TransactionSummary.from_domain(dto.latest_transaction) if dto.latest_transaction else None
            ),
            transactions=[TransactionSummary.from_domain(t) for t in dto.transactions],
            counterpart=CounterpartSummary.from_domain(dto.counterpart) if dto.counterpart else None,
            contact_visible=dto.contact_visible,
            can_confirm=dto.can_confirm,
            can_cancel=dto.can_cancel,
            can_confirm_cash=dto.can_confirm_cash,
            can_confirm_arrival=dto.can_confirm_arrival,
        )
