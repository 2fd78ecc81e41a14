from datetime import date
from decimal import Decimal
from typing import Sequence

from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.use_cases.access import load_listing
from marketplace.application.use_cases.get_availability import GetAvailabilityUseCase
from marketplace.domain.entities.listing import AddOn, Listing, ListingKind
from marketplace.domain.errors import InvalidDateRangeError, ValidationError
from marketplace.domain.services.pricing import PriceQuote, compute_quote, resolve_unit_price
from marketplace.domain.value_objects.stay_range import StayRange


def select_add_ons(listing: Listing, add_on_ids: Sequence[str]) -> list[AddOn]:
    by_id = {add_on.id: add_on for add_on in listing.add_ons}
    unknown = [add_on_id for add_on_id in add_on_ids if add_on_id not in by_id]
    if unknown:
        raise ValidationError("add_on_ids", f"extras inconnus: {', '.join(unknown)}")
    return [by_id[add_on_id] for add_on_id in dict.fromkeys(add_on_ids)]


def stay_for(start: date, end: date | None) -> StayRange:
    end = end or start
    if end < start:
        raise InvalidDateRangeError(
            f"La date de fin ({end.isoformat()}) précède la date de début ({start.isoformat()})"
        )
    return StayRange(start=start, end=end)


class QuotePriceUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        get_availability: GetAvailabilityUseCase,
        service_fee_per_unit: Decimal = Decimal("0"),
    ) -> None:
        self._listing_repo = listing_repo
        self._get_availability = get_availability
        self._service_fee_per_unit = service_fee_per_unit

    async def execute(
        self,
        kind: ListingKind,
        listing_id: str,
        start: date,
        end: date | None = None,
        negotiated_price: Decimal | None = None,
        add_on_ids: Sequence[str] = (),
    ) -> PriceQuote:
        stay = stay_for(start, end)
        if negotiated_price is not None and negotiated_price <= 0:
            raise ValidationError("negotiated_price", "doit être positif")

        listing = await load_listing(self._listing_repo, kind, listing_id)
        add_ons = select_add_ons(listing, add_on_ids)
        snapshot = await self._get_availability.execute(kind, listing_id)

        unit_price = resolve_unit_price(
            listing.base_price,
            override_price=snapshot.override_price(stay.start),
            negotiated_price=negotiated_price,
        )
        return compute_quote(
            stay,
            unit_price,
            add_ons,
            service_fee_per_unit=self._service_fee_per_unit,
            currency_code=listing.currency_code,
        )
