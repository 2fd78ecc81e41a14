from typing import Sequence

from marketplace.domain.entities.listing import Listing, ListingKind


class ListingRepo:
    async def get(self, kind: ListingKind, listing_id: str) -> Listing | None:
        raise NotImplementedError

    async def list_by_owner(self, owner_id: str, kind: ListingKind | None = None) -> Sequence[Listing]:
        raise NotImplementedError

    async def save(self, listing: Listing) -> None:
        raise NotImplementedError
