"""Persistencia de cambios de reservación con control optimista."""

from marketplace.application.interfaces.change_notifier import EVENT_UPDATE, ChangeEvent, ChangeNotifier
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.errors import ConcurrentModificationError


def reservation_row(reservation: Reservation) -> dict:
    return {
        "id": reservation.id,
        "reservation_code": reservation.reservation_code,
        "listing_type": reservation.listing_kind.value,
        "listing_id": reservation.listing_id,
        "status": reservation.status.value,
        "arrival_confirmation": reservation.arrival_confirmation,
        "espece_confirmation": reservation.espece_confirmation,
        "confirmed_at": reservation.confirmed_at.isoformat() if reservation.confirmed_at else None,
    }


async def save_reservation(
    transaction_manager: TransactionManager,
    reservation_repo: ReservationRepo,
    notifier: ChangeNotifier,
    reservation: Reservation,
    expected_lock_version: int,
) -> None:
    async with transaction_manager.start():
        updated = await reservation_repo.update(reservation, expected_lock_version=expected_lock_version)
        if not updated:
            raise ConcurrentModificationError("Reservation", reservation.id)
    await notifier.publish(ChangeEvent(table="reservations", event=EVENT_UPDATE, row=reservation_row(reservation)))
