from datetime import date

from fastapi import APIRouter, Depends, Query

from marketplace.api.dependencies import get_use_cases
from marketplace.api.principal import get_principal
from marketplace.api.schemas.earnings import EarningsResponse
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.principal import Principal
from marketplace.domain.services.settlement import Granularity

router = APIRouter()


@router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    granularity: Granularity = Query(default=Granularity.MONTH),
    cursor: date = Query(...),
    kind: ListingKind | None = Query(default=None),
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> EarningsResponse:
    report = await use_cases["get_earnings"].execute(principal, granularity, cursor, kind=kind)
    return EarningsResponse.from_report(report)
