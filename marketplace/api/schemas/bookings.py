from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from marketplace.api.schemas.common import MoneyModel
from marketplace.application.dtos.booking_dto import BookingResultDTO, CreateBookingDTO
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.transaction import PaymentMethod


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    listing_kind: ListingKind
    listing_id: constr(strip_whitespace=True, min_length=1)
    start_date: date
    end_date: date | None = None
    guests_count: int = 1
    add_on_ids: list[str] = Field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.SERVICE_FEE_ONLY
    negotiated_from_offer_id: str | None = None

    @field_validator("guests_count")
    @classmethod
    def validate_guests_count(cls, value: int) -> int:
        if value < 1:
            raise ValueError("guests_count must be >= 1")
        return value

    def to_dto(self) -> CreateBookingDTO:
        return CreateBookingDTO(
            listing_kind=self.listing_kind,
            listing_id=self.listing_id,
            start_date=self.start_date,
            end_date=self.end_date,
            guests_count=self.guests_count,
            add_on_ids=list(self.add_on_ids),
            payment_method=self.payment_method,
            negotiated_from_offer_id=self.negotiated_from_offer_id,
        )


class BookingResponse(MoneyModel):
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

    @classmethod
    def from_dto(cls, dto: BookingResultDTO) -> "BookingResponse":
        return cls(**dto.to_dict())
