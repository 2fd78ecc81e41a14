from typing import Sequence

from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import Reservation, ReservationStatus


class ReservationRepo:
    async def get(self, reservation_id: str) -> Reservation | None:
        raise NotImplementedError

    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        statuses: Sequence[ReservationStatus] | None = None,
    ) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_for_listings(self, listing_ids: Sequence[str]) -> Sequence[Reservation]:
        raise NotImplementedError

    async def create(self, reservation: Reservation) -> None:
        """Lanza UniqueViolationError si el código ya existe."""
        raise NotImplementedError

    async def update(self, reservation: Reservation, expected_lock_version: int) -> bool:
        """
        Persiste estado e indicadores si lock_version coincide.

        Returns:
            False si otra escritura ganó la carrera.
        """
        raise NotImplementedError

    async def delete(self, reservation_id: str) -> None:
        raise NotImplementedError
