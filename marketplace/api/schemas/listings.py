from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace.api.schemas.common import Money, MoneyModel
from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.services.availability import AvailabilitySnapshot
from marketplace.domain.services.pricing import PriceQuote


class AvailabilityResponse(MoneyModel):
    listing_id: str
    disabled_dates: list[date]
    price_by_date: dict[date, Decimal]

    @classmethod
    def from_snapshot(cls, listing_id: str, snapshot: AvailabilitySnapshot) -> "AvailabilityResponse":
        return cls(
            listing_id=listing_id,
            disabled_dates=sorted(snapshot.disabled_dates),
            price_by_date=dict(sorted(snapshot.price_by_date.items())),
        )


class QuoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date
    end_date: date | None = None
    negotiated_price: Money | None = None
    add_on_ids: list[str] = Field(default_factory=list)

    @field_validator("negotiated_price")
    @classmethod
    def validate_negotiated_price(cls, value: Decimal | None) -> Decimal | None:
        if value is not None and value <= 0:
            raise ValueError("negotiated_price must be > 0")
        return value


class AddOnLineResponse(MoneyModel):
    id: str
    name: str
    price: Decimal
    pricing_model: str
    total: Decimal


class QuoteResponse(MoneyModel):
    units: int
    currency_code: str
    unit_price: Decimal
    base_total: Decimal
    add_ons_total: Decimal
    grand_total: Decimal
    service_fee_per_unit: Decimal
    service_fee_total: Decimal
    amount_due_now: Decimal
    amount_due_in_person: Decimal
    add_ons: list[AddOnLineResponse]

    @classmethod
    def from_quote(cls, quote: PriceQuote) -> "QuoteResponse":
        return cls(
            units=quote.units,
            currency_code=quote.currency_code,
            unit_price=quote.unit_price.amount,
            base_total=quote.base_total.amount,
            add_ons_total=quote.add_ons_total.amount,
            grand_total=quote.grand_total.amount,
            service_fee_per_unit=quote.service_fee_per_unit.amount,
            service_fee_total=quote.service_fee_total.amount,
            amount_due_now=quote.amount_due_now.amount,
            amount_due_in_person=quote.amount_due_in_person.amount,
            add_ons=[AddOnLineResponse(**line.to_dict()) for line in quote.add_on_lines],
        )


class OverrideRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_available: bool = True
    price: Money | None = None


class OverrideResponse(MoneyModel):
    listing_kind: str
    listing_id: str
    date: date
    is_available: bool
    price: Decimal | None = None

    @classmethod
    def from_domain(cls, override: AvailabilityOverride) -> "OverrideResponse":
        return cls(
            listing_kind=override.listing_kind.value,
            listing_id=override.listing_id,
            date=override.date,
            is_available=override.is_available,
            price=override.price,
        )
