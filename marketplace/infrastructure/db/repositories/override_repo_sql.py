from datetime import date
from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.override_repo import OverrideRepo
from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.listing import ListingKind
from marketplace.infrastructure.db.integrity import guarded_write
from marketplace.infrastructure.db.tables import availability_overrides


class OverrideRepoSQL(OverrideRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        date_from: date,
        date_to: date,
    ) -> Sequence[AvailabilityOverride]:
        stmt = (
            select(availability_overrides)
            .where(
                availability_overrides.c.listing_type == kind.value,
                availability_overrides.c.listing_id == listing_id,
                availability_overrides.c.date >= date_from,
                availability_overrides.c.date <= date_to,
            )
            .order_by(availability_overrides.c.date)
        )
        result = await self._session.execute(stmt)
        return [
            AvailabilityOverride(
                listing_kind=ListingKind(row["listing_type"]),
                listing_id=row["listing_id"],
                date=row["date"],
                is_available=bool(row["is_available"]),
                price=row["price"],
            )
            for row in result.mappings()
        ]

    async def upsert(self, override: AvailabilityOverride) -> AvailabilityOverride:
        key = (
            availability_overrides.c.listing_type == override.listing_kind.value,
            availability_overrides.c.listing_id == override.listing_id,
            availability_overrides.c.date == override.date,
        )
        values = {"is_available": override.is_available, "price": override.price}
        async with guarded_write(self._session, "availability_overrides"):
            result = await self._session.execute(update(availability_overrides).where(*key).values(**values))
            if result.rowcount == 0:
                await self._session.execute(
                    availability_overrides.insert().values(
                        listing_type=override.listing_kind.value,
                        listing_id=override.listing_id,
                        date=override.date,
                        **values,
                    )
                )
        return override

    async def delete(self, kind: ListingKind, listing_id: str, day: date) -> bool:
        result = await self._session.execute(
            delete(availability_overrides).where(
                availability_overrides.c.listing_type == kind.value,
                availability_overrides.c.listing_id == listing_id,
                availability_overrides.c.date == day,
            )
        )
        return result.rowcount > 0
