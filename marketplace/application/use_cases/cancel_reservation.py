import logging

from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.application.use_cases.access import load_reservation, require_principal
from marketplace.application.use_cases.reservation_writes import save_reservation
from marketplace.domain.constants import CANCELLATION_WINDOW_HOURS
from marketplace.domain.entities.principal import Principal
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.errors import CancellationNotAllowedError
from marketplace.domain.services.settlement import can_cancel


class CancelReservationUseCase:
    """
    Cancela una reservación dentro de la ventana de 24 h.

    La ventana corre desde confirmed_at (o created_at) y se cierra en cuanto
    hay pago, efectivo confirmado o llegada confirmada. No hay excepciones.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        transaction_repo: TransactionRepo,
        listing_repo: ListingRepo,
        clock: Clock,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
        window_hours: int = CANCELLATION_WINDOW_HOURS,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_repo = transaction_repo
        self._listing_repo = listing_repo
        self._clock = clock
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._window_hours = window_hours
        self._logger = logging.getLogger(__name__)

    async def execute(self, principal: Principal | None, reservation_id: str) -> Reservation:
        principal = require_principal(principal)
        reservation, _, role = await load_reservation(
            self._reservation_repo, self._listing_repo, principal, reservation_id
        )
        transactions = await self._transaction_repo.list_by_reservation(reservation.id)

        decision = can_cancel(reservation, transactions, self._clock.now(), self._window_hours)
        if not decision.allowed:
            raise CancellationNotAllowedError(reservation.id, decision.reason or "")

        expected = reservation.lock_version
        reservation.cancel()
        await save_reservation(
            self._transaction_manager, self._reservation_repo, self._notifier, reservation, expected
        )

        self._logger.info(
            "Reservation cancelled",
            extra={"reservation_id": reservation.id, "cancelled_by": role},
        )
        return reservation
