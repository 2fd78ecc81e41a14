from datetime import date

from fastapi import APIRouter, Depends, Response, status

from marketplace.api.dependencies import get_use_cases
from marketplace.api.principal import get_principal
from marketplace.api.schemas.listings import (
    AvailabilityResponse,
    OverrideRequest,
    OverrideResponse,
    QuoteRequest,
    QuoteResponse,
)
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.principal import Principal

router = APIRouter()


@router.get("/listings/{kind}/{listing_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    kind: ListingKind,
    listing_id: str,
    use_cases=Depends(get_use_cases),
) -> AvailabilityResponse:
    snapshot = await use_cases["get_availability"].execute(kind, listing_id)
    return AvailabilityResponse.from_snapshot(listing_id, snapshot)


@router.post("/listings/{kind}/{listing_id}/quote", response_model=QuoteResponse)
async def quote_price(
    kind: ListingKind,
    listing_id: str,
    payload: QuoteRequest,
    use_cases=Depends(get_use_cases),
) -> QuoteResponse:
    quote = await use_cases["quote_price"].execute(
        kind,
        listing_id,
        start=payload.start_date,
        end=payload.end_date,
        negotiated_price=payload.negotiated_price,
        add_on_ids=payload.add_on_ids,
    )
    return QuoteResponse.from_quote(quote)


@router.put("/listings/{kind}/{listing_id}/overrides/{day}", response_model=OverrideResponse)
async def upsert_override(
    kind: ListingKind,
    listing_id: str,
    day: date,
    payload: OverrideRequest,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> OverrideResponse:
    override = await use_cases["upsert_override"].execute(
        principal,
        kind,
        listing_id,
        day,
        is_available=payload.is_available,
        price=payload.price,
    )
    return OverrideResponse.from_domain(override)


@router.delete("/listings/{kind}/{listing_id}/overrides/{day}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_override(
    kind: ListingKind,
    listing_id: str,
    day: date,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> Response:
    await use_cases["delete_override"].execute(principal, kind, listing_id, day)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
