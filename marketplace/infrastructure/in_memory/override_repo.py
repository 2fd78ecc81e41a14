"""Implementación in-memory de overrides de disponibilidad."""

from copy import deepcopy
from datetime import date
from typing import Sequence

from marketplace.application.interfaces.override_repo import OverrideRepo
from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.listing import ListingKind


class InMemoryOverrideRepo(OverrideRepo):
    def __init__(self) -> None:
        # Clave única: (listing_type, listing_id, date)
        self._overrides: dict[tuple[str, str, date], AvailabilityOverride] = {}

    async def list_for_listing(
        self,
        kind: ListingKind,
        listing_id: str,
        date_from: date,
        date_to: date,
    ) -> Sequence[AvailabilityOverride]:
        return sorted(
            (
                deepcopy(o)
                for (k, lid, day), o in self._overrides.items()
                if k == kind.value and lid == listing_id and date_from <= day <= date_to
            ),
            key=lambda o: o.date,
        )

    async def upsert(self, override: AvailabilityOverride) -> AvailabilityOverride:
        key = (override.listing_kind.value, override.listing_id, override.date)
        self._overrides[key] = deepcopy(override)
        return deepcopy(override)

    async def delete(self, kind: ListingKind, listing_id: str, day: date) -> bool:
        return self._overrides.pop((kind.value, listing_id, day), None) is not None
