"""Implementación in-memory del repositorio de reservaciones."""

from copy import deepcopy
from typing import Sequence

from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.errors import UniqueViolationError


class InMemoryReservationRepo(ReservationRepo):
    """Guarda copias para que las actualizaciones respeten lock_version."""

    def __init__(self) -> None:
        self._reservations: dict[str, Reservation] = {}
        self._codes: set[str] = set()

    async def get(self, reservation_id: str) -> Reservation | None:
        reservation = self._reservations.get(reservation_id)
        return deepcopy(reservation) if reservation else None

    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        statuses: Sequence[ReservationStatus] | None = None,
    ) -> Sequence[Reservation]:
        return [
            deepcopy(r)
            for r in self._reservations.values()
            if r.listing_kind == kind
            and r.listing_id == listing_id
            and (statuses is None or r.status in statuses)
        ]

    async def list_for_listings(self, listing_ids: Sequence[str]) -> Sequence[Reservation]:
        wanted = set(listing_ids)
        return [deepcopy(r) for r in self._reservations.values() if r.listing_id in wanted]

    async def create(self, reservation: Reservation) -> None:
        if reservation.reservation_code in self._codes:
            raise UniqueViolationError("reservations", f"reservation_code={reservation.reservation_code}")
        self._codes.add(reservation.reservation_code)
        self._reservations[reservation.id] = deepcopy(reservation)

    async def update(self, reservation: Reservation, expected_lock_version: int) -> bool:
        current = self._reservations.get(reservation.id)
        if current is None or current.lock_version != expected_lock_version:
            return False
        self._reservations[reservation.id] = deepcopy(reservation)
        return True

    async def delete(self, reservation_id: str) -> None:
        removed = self._reservations.pop(reservation_id, None)
        if removed is not None:
            self._codes.discard(removed.reservation_code)

    def reserve_code(self, code: str) -> None:
        """Marca un código como ocupado (para forzar colisiones en pruebas)."""
        self._codes.add(code)

    def clear(self) -> None:
        self._reservations.clear()
        self._codes.clear()
