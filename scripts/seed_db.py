import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from marketplace.api.deps import AsyncSessionLocal, engine  # noqa: E402
from marketplace.domain.entities.listing import (  # noqa: E402
    AddOn,
    Listing,
    ListingKind,
    PricingModel,
    RentalUnit,
)
from marketplace.domain.entities.principal import UserProfile  # noqa: E402
from marketplace.infrastructure.db.repositories import ListingRepoSQL, UserRepoSQL  # noqa: E402
from marketplace.infrastructure.db.tables import metadata  # noqa: E402

OWNER_ID = "owner-demo"
BUYER_ID = "buyer-demo"

LISTINGS = [
    Listing(
        id="lodging-lome-1",
        kind=ListingKind.LODGING,
        owner_id=OWNER_ID,
        title="Villa Lomé Plage",
        base_price=Decimal("25000"),
        currency_code="XOF",
        rental_unit=RentalUnit.DAY,
        add_ons=[
            AddOn(id="addon-breakfast", name="Petit-déjeuner", price=Decimal("3000"), pricing_model=PricingModel.PER_NIGHT),
            AddOn(id="addon-cleaning", name="Ménage", price=Decimal("5000"), pricing_model=PricingModel.PER_STAY),
        ],
    ),
    Listing(
        id="vehicle-kara-1",
        kind=ListingKind.VEHICLE,
        owner_id=OWNER_ID,
        title="Toyota RAV4",
        base_price=Decimal("40000"),
        currency_code="XOF",
        rental_unit=RentalUnit.DAY,
    ),
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("Created all tables.")

    async with AsyncSessionLocal() as session:
        async with session.begin():
            listing_repo = ListingRepoSQL(session)
            user_repo = UserRepoSQL(session)
            for listing in LISTINGS:
                await listing_repo.save(listing)
            await user_repo.save(UserProfile(id=OWNER_ID, full_name="Kossi Owner", email="owner@example.com", phone="+22890000000"))
            await user_repo.save(UserProfile(id=BUYER_ID, full_name="Ama Buyer", email="buyer@example.com", phone="+22891111111"))

    print(f"Seeded {len(LISTINGS)} listings and 2 users.")

if __name__ == "__main__":
    asyncio.run(seed())
