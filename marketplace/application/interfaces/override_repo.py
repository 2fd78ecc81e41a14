from datetime import date
from typing import Sequence

from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.listing import ListingKind


class OverrideRepo:
    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        date_from: date,
        date_to: date,
    ) -> Sequence[AvailabilityOverride]:
        raise NotImplementedError

    async def upsert(self, override: AvailabilityOverride) -> AvailabilityOverride:
        """Inserta o reemplaza la fila única (kind, listing_id, date)."""
        raise NotImplementedError

    async def delete(self, kind: ListingKind, listing_id: str, day: date) -> bool:
        raise NotImplementedError
