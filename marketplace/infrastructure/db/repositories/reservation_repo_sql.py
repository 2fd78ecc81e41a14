from typing import Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.infrastructure.db.converters import as_utc
from marketplace.infrastructure.db.integrity import guarded_write
from marketplace.infrastructure.db.tables import reservations


def _to_entity(row) -> Reservation:
    return Reservation(
        id=row["id"],
        reservation_code=row["reservation_code"],
        listing_kind=ListingKind(row["listing_type"]),
        listing_id=row["listing_id"],
        user_id=row["user_id"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        unit_price=row["unit_price"],
        total_price=row["total_price"],
        commission=row["commission"],
        price_espece=row["price_espece"],
        currency_code=row["currency_code"],
        status=ReservationStatus(row["status"]),
        arrival_confirmation=bool(row["arrival_confirmation"]),
        espece_confirmation=bool(row["espece_confirmation"]),
        guests_count=row["guests_count"],
        guest_info=row["guest_info"] or {},
        source_offer_message_id=row["source_offer_message_id"],
        lock_version=row["lock_version"],
        created_at=as_utc(row["created_at"]),
        confirmed_at=as_utc(row["confirmed_at"]),
    )


class ReservationRepoSQL(ReservationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, reservation_id: str) -> Reservation | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return _to_entity(row)

    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        statuses: Sequence[ReservationStatus] | None = None,
    ) -> Sequence[Reservation]:
        stmt = select(reservations).where(
            reservations.c.listing_type == kind.value,
            reservations.c.listing_id == listing_id,
        )
        if statuses is not None:
            stmt = stmt.where(reservations.c.status.in_([s.value for s in statuses]))
        result = await self._session.execute(stmt.order_by(reservations.c.start_date))
        return [_to_entity(row) for row in result.mappings()]

    async def list_for_listings(self, listing_ids: Sequence[str]) -> Sequence[Reservation]:
        if not listing_ids:
            return []
        stmt = select(reservations).where(reservations.c.listing_id.in_(list(listing_ids)))
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings()]

    async def create(self, reservation: Reservation) -> None:
        values = {
            "id": reservation.id,
            "reservation_code": reservation.reservation_code,
            "listing_type": reservation.listing_kind.value,
            "listing_id": reservation.listing_id,
            "user_id": reservation.user_id,
            "start_date": reservation.start_date,
            "end_date": reservation.end_date,
            "unit_price": reservation.unit_price,
            "total_price": reservation.total_price,
            "commission": reservation.commission,
            "price_espece": reservation.price_espece,
            "currency_code": reservation.currency_code,
            "status": reservation.status.value,
            "arrival_confirmation": reservation.arrival_confirmation,
            "espece_confirmation": reservation.espece_confirmation,
            "guests_count": reservation.guests_count,
            "guest_info": reservation.guest_info,
            "source_offer_message_id": reservation.source_offer_message_id,
            "lock_version": reservation.lock_version,
            "created_at": reservation.created_at,
            "confirmed_at": reservation.confirmed_at,
        }
        async with guarded_write(self._session, "reservations"):
            await self._session.execute(insert(reservations).values(values))

    async def update(self, reservation: Reservation, expected_lock_version: int) -> bool:
        stmt = (
            update(reservations)
            .where(
                reservations.c.id == reservation.id,
                reservations.c.lock_version == expected_lock_version,
            )
            .values(
                status=reservation.status.value,
                confirmed_at=reservation.confirmed_at,
                arrival_confirmation=reservation.arrival_confirmation,
                espece_confirmation=reservation.espece_confirmation,
                lock_version=reservations.c.lock_version + 1,
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete(self, reservation_id: str) -> None:
        await self._session.execute(delete(reservations).where(reservations.c.id == reservation_id))
