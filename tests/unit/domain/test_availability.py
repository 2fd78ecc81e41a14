"""Tests del resolvedor de disponibilidad."""

from datetime import date, datetime, timezone
from decimal import Decimal

from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.services.availability import add_months, resolve_unavailability
from marketplace.domain.value_objects.stay_range import StayRange

TODAY = date(2024, 6, 1)


def _reservation(start: date, end: date, status=ReservationStatus.CONFIRMED) -> Reservation:
    return Reservation(
        id=f"r-{start.isoformat()}",
        reservation_code=f"TG-{start.day:04d}-AAAA",
        listing_kind=ListingKind.LODGING,
        listing_id="villa-1",
        user_id="buyer-1",
        start_date=start,
        end_date=end,
        status=status,
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def _override(day: date, is_available=True, price=None) -> AvailabilityOverride:
    return AvailabilityOverride(
        listing_kind=ListingKind.LODGING,
        listing_id="villa-1",
        date=day,
        is_available=is_available,
        price=price,
    )


class TestResolveUnavailability:
    def test_confirmed_reservation_blocks_nights_only(self):
        snapshot = resolve_unavailability([_reservation(date(2024, 6, 10), date(2024, 6, 12))], [], TODAY)

        assert snapshot.disabled_dates == {date(2024, 6, 10), date(2024, 6, 11)}

    def test_single_day_reservation_blocks_its_day(self):
        snapshot = resolve_unavailability([_reservation(date(2024, 6, 10), date(2024, 6, 10))], [], TODAY)

        assert snapshot.disabled_dates == {date(2024, 6, 10)}

    def test_pending_and_cancelled_reservations_do_not_block(self):
        reservations = [
            _reservation(date(2024, 6, 10), date(2024, 6, 12), ReservationStatus.PENDING),
            _reservation(date(2024, 6, 20), date(2024, 6, 22), ReservationStatus.CANCELLED),
        ]

        assert resolve_unavailability(reservations, [], TODAY).disabled_dates == frozenset()

    def test_closed_override_blocks_and_priced_override_is_exposed(self):
        overrides = [
            _override(date(2024, 7, 1), price=Decimal("80")),
            _override(date(2024, 7, 2), is_available=False),
        ]

        snapshot = resolve_unavailability([], overrides, TODAY)

        assert snapshot.is_disabled(date(2024, 7, 2))
        assert not snapshot.is_disabled(date(2024, 7, 1))
        assert snapshot.override_price(date(2024, 7, 1)) == Decimal("80")

    def test_overrides_outside_horizon_are_ignored(self):
        overrides = [
            _override(date(2024, 5, 31), is_available=False),
            _override(add_months(TODAY, 18), is_available=False),
            _override(date(2026, 1, 1), is_available=False),
        ]

        snapshot = resolve_unavailability([], overrides, TODAY)

        assert snapshot.disabled_dates == {date(2025, 12, 1)}

    def test_conflicting_dates_lists_blocked_nights(self):
        snapshot = resolve_unavailability([_reservation(date(2024, 6, 10), date(2024, 6, 12))], [], TODAY)

        conflicts = snapshot.conflicting_dates(StayRange(date(2024, 6, 8), date(2024, 6, 11)))

        assert conflicts == [date(2024, 6, 10)]
        assert snapshot.conflicting_dates(StayRange(date(2024, 6, 12), date(2024, 6, 14))) == []


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
