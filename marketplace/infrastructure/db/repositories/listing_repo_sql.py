from typing import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.domain.entities.listing import AddOn, Listing, ListingKind, PricingModel, RentalUnit
from marketplace.infrastructure.db.tables import listing_add_ons, listings


class ListingRepoSQL(ListingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _add_ons(self, kind: str, listing_id: str) -> list[AddOn]:
        stmt = (
            select(listing_add_ons)
            .where(listing_add_ons.c.listing_type == kind, listing_add_ons.c.listing_id == listing_id)
            .order_by(listing_add_ons.c.name)
        )
        result = await self._session.execute(stmt)
        return [
            AddOn(
                id=row["id"],
                name=row["name"],
                price=row["price"],
                pricing_model=PricingModel(row["pricing_model"]),
            )
            for row in result.mappings()
        ]

    async def _to_entity(self, row) -> Listing:
        return Listing(
            id=row["id"],
            kind=ListingKind(row["listing_type"]),
            owner_id=row["owner_id"],
            title=row["title"],
            base_price=row["base_price"],
            currency_code=row["currency_code"],
            rental_unit=RentalUnit(row["rental_unit"]),
            add_ons=await self._add_ons(row["listing_type"], row["id"]),
        )

    async def get(self, kind: ListingKind, listing_id: str) -> Listing | None:
        stmt = select(listings).where(listings.c.listing_type == kind.value, listings.c.id == listing_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return await self._to_entity(row)

    async def list_by_owner(self, owner_id: str, kind: ListingKind | None = None) -> Sequence[Listing]:
        stmt = select(listings).where(listings.c.owner_id == owner_id)
        if kind is not None:
            stmt = stmt.where(listings.c.listing_type == kind.value)
        result = await self._session.execute(stmt)
        return [await self._to_entity(row) for row in result.mappings().all()]

    async def save(self, listing: Listing) -> None:
        await self._session.execute(
            delete(listings).where(listings.c.listing_type == listing.kind.value, listings.c.id == listing.id)
        )
        await self._session.execute(
            delete(listing_add_ons).where(
                listing_add_ons.c.listing_type == listing.kind.value,
                listing_add_ons.c.listing_id == listing.id,
            )
        )
        await self._session.execute(
            insert(listings).values(
                listing_type=listing.kind.value,
                id=listing.id,
                owner_id=listing.owner_id,
                title=listing.title,
                base_price=listing.base_price,
                currency_code=listing.currency_code,
                rental_unit=listing.rental_unit.value,
            )
        )
        if listing.add_ons:
            await self._session.execute(
                insert(listing_add_ons),
                [
                    {
                        "id": add_on.id,
                        "listing_type": listing.kind.value,
                        "listing_id": listing.id,
                        "name": add_on.name,
                        "price": add_on.price,
                        "pricing_model": add_on.pricing_model.value,
                    }
                    for add_on in listing.add_ons
                ],
            )
