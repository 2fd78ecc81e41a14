from datetime import date

from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.application.use_cases.access import require_principal
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.principal import Principal
from marketplace.domain.services.settlement import EarningsReport, Granularity, aggregate_earnings


class GetEarningsUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        reservation_repo: ReservationRepo,
        transaction_repo: TransactionRepo,
    ) -> None:
        self._listing_repo = listing_repo
        self._reservation_repo = reservation_repo
        self._transaction_repo = transaction_repo

    async def execute(
        self,
        principal: Principal | None,
        granularity: Granularity,
        cursor: date,
        kind: ListingKind | None = None,
    ) -> EarningsReport:
        principal = require_principal(principal)
        listings = await self._listing_repo.list_by_owner(principal.id, kind)
        keys = {(listing.kind, listing.id) for listing in listings}

        reservations = [
            r
            for r in await self._reservation_repo.list_for_listings([listing.id for listing in listings])
            if (r.listing_kind, r.listing_id) in keys
        ]
        transactions = await self._transaction_repo.list_by_reservations([r.id for r in reservations])
        return aggregate_earnings(reservations, transactions, granularity, cursor)
