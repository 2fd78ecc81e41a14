from fastapi import APIRouter, Depends

from marketplace.api.dependencies import get_use_cases
from marketplace.api.principal import get_principal
from marketplace.api.schemas.reservations import ReservationDetailsResponse, ReservationResponse
from marketplace.domain.entities.principal import Principal

router = APIRouter()


@router.get("/reservations/{reservation_id}", response_model=ReservationDetailsResponse)
async def get_reservation(
    reservation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ReservationDetailsResponse:
    details = await use_cases["get_reservation"].execute(principal, reservation_id)
    return ReservationDetailsResponse.from_dto(details)


async def _transition(use_cases, key: str, principal: Principal | None, reservation_id: str):
    reservation = await use_cases[key].execute(principal, reservation_id)
    return ReservationResponse.from_domain(reservation)


@router.post("/reservations/{reservation_id}/confirm", response_model=ReservationResponse)
async def confirm_reservation(
    reservation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    return await _transition(use_cases, "confirm_reservation", principal, reservation_id)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    return await _transition(use_cases, "cancel_reservation", principal, reservation_id)


@router.post("/reservations/{reservation_id}/cash-confirmation", response_model=ReservationResponse)
async def confirm_cash(
    reservation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    return await _transition(use_cases, "confirm_cash", principal, reservation_id)


@router.post("/reservations/{reservation_id}/arrival", response_model=ReservationResponse)
async def confirm_arrival(
    reservation_id: str,
    principal: Principal | None = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    return await _transition(use_cases, "confirm_arrival", principal, reservation_id)
