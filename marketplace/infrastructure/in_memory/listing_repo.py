"""Implementación in-memory del repositorio de anuncios."""

from copy import deepcopy
from typing import Sequence

from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.domain.entities.listing import Listing, ListingKind


class InMemoryListingRepo(ListingRepo):
    def __init__(self) -> None:
        self._listings: dict[tuple[str, str], Listing] = {}

    async def get(self, kind: ListingKind, listing_id: str) -> Listing | None:
        listing = self._listings.get((kind.value, listing_id))
        return deepcopy(listing) if listing else None

    async def list_by_owner(self, owner_id: str, kind: ListingKind | None = None) -> Sequence[Listing]:
        return [
            deepcopy(listing)
            for listing in self._listings.values()
            if listing.owner_id == owner_id and (kind is None or listing.kind == kind)
        ]

    async def save(self, listing: Listing) -> None:
        self._listings[(listing.kind.value, listing.id)] = deepcopy(listing)

    def clear(self) -> None:
        self._listings.clear()
