import logging

from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import ROLE_OWNER, load_reservation, require_principal
from marketplace.application.use_cases.reservation_writes import save_reservation
from marketplace.domain.entities.principal import Principal
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.errors import InvalidReservationStatusError, NotAllowedError
from marketplace.domain.services.settlement import can_mark_cash_confirmed


class ConfirmCashUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        listing_repo: ListingRepo,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._listing_repo = listing_repo
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, principal: Principal | None, reservation_id: str) -> Reservation:
        principal = require_principal(principal)
        reservation, _, role = await load_reservation(
            self._reservation_repo, self._listing_repo, principal, reservation_id
        )
        if role != ROLE_OWNER:
            raise NotAllowedError("confirmer les espèces", "réservé au propriétaire")
        if not can_mark_cash_confirmed(reservation):
            raise InvalidReservationStatusError(
                reservation.status.value, ["confirmed", "completed"], "confirmer les espèces"
            )

        if not reservation.cash_due:
            self._logger.info(
                "Cash confirmed on reservation without cash due",
                extra={"reservation_id": reservation.id},
            )

        expected = reservation.lock_version
        reservation.mark_cash_confirmed()
        await save_reservation(
            self._transaction_manager, self._reservation_repo, self._notifier, reservation, expected
        )
        return reservation
