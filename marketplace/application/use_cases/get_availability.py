import logging

from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.override_repo import OverrideRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.use_cases.access import load_listing
from marketplace.domain.constants import AVAILABILITY_HORIZON_MONTHS
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import ReservationStatus
from marketplace.domain.errors import AvailabilityUnavailableError, DomainError
from marketplace.domain.services.availability import (
    AvailabilitySnapshot,
    add_months,
    resolve_unavailability,
)


class GetAvailabilityUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        reservation_repo: ReservationRepo,
        override_repo: OverrideRepo,
        clock: Clock,
        horizon_months: int = AVAILABILITY_HORIZON_MONTHS,
    ) -> None:
        self._listing_repo = listing_repo
        self._reservation_repo = reservation_repo
        self._override_repo = override_repo
        self._clock = clock
        self._horizon_months = horizon_months
        self._logger = logging.getLogger(__name__)

    async def execute(self, kind: ListingKind, listing_id: str) -> AvailabilitySnapshot:
        await load_listing(self._listing_repo, kind, listing_id)
        today = self._clock.today()

        try:
            reservations = await self._reservation_repo.list_for_listing(
                kind,
                listing_id,
                statuses=(ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED),
            )
            overrides = await self._override_repo.list_for_listing(
                kind, listing_id, today, add_months(today, self._horizon_months)
            )
        except DomainError:
            raise
        except Exception as exc:
            # Sin datos no se ofrece un calendario optimista
            self._logger.error(
                "Availability fetch failed",
                exc_info=exc,
                extra={"listing_id": listing_id, "listing_kind": kind.value},
            )
            raise AvailabilityUnavailableError(listing_id) from exc

        return resolve_unavailability(
            reservations,
            overrides,
            today=today,
            horizon_months=self._horizon_months,
        )
