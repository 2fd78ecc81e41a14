import logging

from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import ROLE_OWNER, load_reservation, require_principal
from marketplace.application.use_cases.reservation_writes import save_reservation
from marketplace.domain.entities.principal import Principal
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.errors import DatesUnavailableError, NotAllowedError
from marketplace.domain.services.availability import OCCUPYING, overlapping_dates


class ConfirmReservationUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        listing_repo: ListingRepo,
        clock: Clock,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._listing_repo = listing_repo
        self._clock = clock
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, principal: Principal | None, reservation_id: str) -> Reservation:
        principal = require_principal(principal)
        reservation, _, role = await load_reservation(
            self._reservation_repo, self._listing_repo, principal, reservation_id
        )
        if role != ROLE_OWNER:
            raise NotAllowedError("confirmer la réservation", "réservé au propriétaire")

        expected = reservation.lock_version
        reservation.confirm(self._clock.now())

        # las reservas pendientes no bloquean fechas; se revalida al confirmar
        occupying = await self._reservation_repo.list_for_listing(
            reservation.listing_kind, reservation.listing_id, statuses=OCCUPYING
        )
        conflicts = overlapping_dates(
            reservation.stay_range, [r for r in occupying if r.id != reservation.id]
        )
        if conflicts:
            raise DatesUnavailableError([day.isoformat() for day in conflicts])
        await save_reservation(
            self._transaction_manager, self._reservation_repo, self._notifier, reservation, expected
        )

        self._logger.info(
            "Reservation confirmed",
            extra={"reservation_id": reservation.id, "reservation_code": reservation.reservation_code},
        )
        return reservation
