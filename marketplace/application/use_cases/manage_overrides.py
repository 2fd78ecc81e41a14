import logging
from datetime import date
from decimal import Decimal

from marketplace.application.interfaces.change_notifier import (
    EVENT_DELETE,
    EVENT_UPDATE,
    ChangeEvent,
    ChangeNotifier,
)
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.override_repo import OverrideRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import load_owned_listing, require_principal
from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import ValidationError


def _override_row(override: AvailabilityOverride) -> dict:
    return {
        "listing_type": override.listing_kind.value,
        "listing_id": override.listing_id,
        "date": override.date.isoformat(),
        "is_available": override.is_available,
        "price": str(override.price) if override.price is not None else None,
    }


class UpsertOverrideUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        override_repo: OverrideRepo,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
    ) -> None:
        self._listing_repo = listing_repo
        self._override_repo = override_repo
        self._notifier = notifier
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal | None,
        kind: ListingKind,
        listing_id: str,
        day: date,
        is_available: bool = True,
        price: Decimal | None = None,
    ) -> AvailabilityOverride:
        principal = require_principal(principal)
        if price is not None and price < 0:
            raise ValidationError("price", "ne peut pas être négatif")
        await load_owned_listing(
            self._listing_repo, principal, kind, listing_id, "modifier la disponibilité"
        )

        async with self._transaction_manager.start():
            override = await self._override_repo.upsert(
                AvailabilityOverride(
                    listing_kind=kind,
                    listing_id=listing_id,
                    date=day,
                    is_available=is_available,
                    price=price,
                )
            )
        self._logger.info(
            "Availability override saved",
            extra={"listing_id": listing_id, "date": day.isoformat(), "is_available": is_available},
        )
        await self._notifier.publish(
            ChangeEvent(table="availability_overrides", event=EVENT_UPDATE, row=_override_row(override))
        )
        return override


class DeleteOverrideUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        override_repo: OverrideRepo,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
    ) -> None:
        self._listing_repo = listing_repo
        self._override_repo = override_repo
        self._notifier = notifier
        self._transaction_manager = transaction_manager

    async def execute(
        self,
        principal: Principal | None,
        kind: ListingKind,
        listing_id: str,
        day: date,
    ) -> bool:
        principal = require_principal(principal)
        await load_owned_listing(
            self._listing_repo, principal, kind, listing_id, "modifier la disponibilité"
        )
        async with self._transaction_manager.start():
            deleted = await self._override_repo.delete(kind, listing_id, day)
        if deleted:
            await self._notifier.publish(
                ChangeEvent(
                    table="availability_overrides",
                    event=EVENT_DELETE,
                    row={"listing_type": kind.value, "listing_id": listing_id, "date": day.isoformat()},
                )
            )
        return deleted
