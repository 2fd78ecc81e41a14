from fastapi import APIRouter, Depends, Header, status

from marketplace.api.dependencies import get_use_cases
from marketplace.api.principal import get_principal
from marketplace.api.schemas.bookings import BookingResponse, CreateBookingRequest
from marketplace.domain.entities.principal import Principal

router = APIRouter()


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: CreateBookingRequest,
    idem_key: str | None = Header(default=None, convert_underscores=False, alias="Idempotency-Key"),
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    result = await use_cases["create_booking"].execute(principal, payload.to_dto(), idem_key=idem_key)
    return BookingResponse.from_dto(result)
