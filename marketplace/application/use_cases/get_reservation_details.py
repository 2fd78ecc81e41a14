from marketplace.application.dtos.reservation_dto import ReservationDetailsDTO
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.application.interfaces.user_repo import UserRepo
from marketplace.application.use_cases.access import ROLE_BUYER, ROLE_OWNER, load_reservation, require_principal
from marketplace.domain.constants import CANCELLATION_WINDOW_HOURS
from marketplace.domain.entities.principal import Principal, UserProfile
from marketplace.domain.entities.reservation import ReservationStatus
from marketplace.domain.services.settlement import (
    can_cancel,
    can_confirm_arrival,
    can_mark_cash_confirmed,
    can_reveal_contact,
    latest_transaction,
)


class GetReservationDetailsUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        transaction_repo: TransactionRepo,
        listing_repo: ListingRepo,
        user_repo: UserRepo,
        clock: Clock,
        window_hours: int = CANCELLATION_WINDOW_HOURS,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_repo = transaction_repo
        self._listing_repo = listing_repo
        self._user_repo = user_repo
        self._clock = clock
        self._window_hours = window_hours

    async def execute(self, principal: Principal | None, reservation_id: str) -> ReservationDetailsDTO:
        principal = require_principal(principal)
        reservation, listing, role = await load_reservation(
            self._reservation_repo, self._listing_repo, principal, reservation_id
        )
        transactions = list(await self._transaction_repo.list_by_reservation(reservation.id))

        counterpart_id = reservation.user_id if role == ROLE_OWNER else (listing.owner_id if listing else None)
        counterpart = await self._user_repo.get(counterpart_id) if counterpart_id else None

        contact_visible = can_reveal_contact(reservation, transactions)
        if counterpart is not None and not contact_visible:
            counterpart = UserProfile(id=counterpart.id, full_name=counterpart.full_name)

        is_owner = role == ROLE_OWNER
        return ReservationDetailsDTO(
            reservation=reservation,
            role=role,
            latest_transaction=latest_transaction(transactions),
            transactions=transactions,
            counterpart=counterpart,
            contact_visible=contact_visible,
            can_confirm=is_owner and reservation.status == ReservationStatus.PENDING,
            can_cancel=can_cancel(reservation, transactions, self._clock.now(), self._window_hours).allowed,
            can_confirm_cash=is_owner and can_mark_cash_confirmed(reservation),
            can_confirm_arrival=role == ROLE_BUYER and can_confirm_arrival(reservation),
        )
