"""Tests de elegibilidad, cancelación e ingresos."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.entities.transaction import PaymentMethod, Transaction, TransactionStatus
from marketplace.domain.services.settlement import (
    Granularity,
    aggregate_earnings,
    can_cancel,
    can_confirm_arrival,
    can_mark_cash_confirmed,
    can_reveal_contact,
    is_eligible_for_payout,
    latest_transaction,
)

CREATED = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def _reservation(**overrides) -> Reservation:
    data = dict(
        id="r-1",
        reservation_code="TG-AAAA-0001",
        listing_kind=ListingKind.LODGING,
        listing_id="villa-1",
        user_id="buyer-1",
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 12),
        total_price=Decimal("200"),
        commission=Decimal("20"),
        price_espece=Decimal("180"),
        status=ReservationStatus.CONFIRMED,
        arrival_confirmation=True,
        espece_confirmation=True,
        created_at=CREATED,
        confirmed_at=CREATED,
    )
    data.update(overrides)
    return Reservation(**data)


def _transaction(status=TransactionStatus.PAID, created_at=CREATED, reservation_id="r-1") -> Transaction:
    return Transaction(
        id=f"t-{created_at.isoformat()}",
        reservation_id=reservation_id,
        user_id="buyer-1",
        amount=Decimal("20"),
        commission=Decimal("20"),
        status=status,
        payment_method=PaymentMethod.SERVICE_FEE_ONLY,
        created_at=created_at,
    )


class TestPayoutEligibility:
    """Las cuatro condiciones son necesarias."""

    def test_eligible_when_all_conditions_hold(self):
        assert is_eligible_for_payout(_reservation(), [_transaction()])

    def test_cash_due_and_unconfirmed_is_excluded(self):
        assert not is_eligible_for_payout(_reservation(espece_confirmation=False), [_transaction()])

    def test_no_cash_due_does_not_need_cash_confirmation(self):
        reservation = _reservation(price_espece=Decimal("0"), espece_confirmation=False)

        assert is_eligible_for_payout(reservation, [_transaction()])

    def test_requires_arrival(self):
        assert not is_eligible_for_payout(_reservation(arrival_confirmation=False), [_transaction()])

    def test_requires_paid_transaction(self):
        assert not is_eligible_for_payout(_reservation(), [_transaction(TransactionStatus.PENDING)])

    def test_requires_confirmed_status(self):
        assert not is_eligible_for_payout(_reservation(status=ReservationStatus.PENDING), [_transaction()])


class TestCancellation:
    def _open(self, **overrides) -> Reservation:
        return _reservation(**{"arrival_confirmation": False, "espece_confirmation": False, **overrides})

    def test_allowed_inside_window_without_payment(self):
        decision = can_cancel(self._open(), [], CREATED + timedelta(hours=2))

        assert decision.allowed
        assert decision.reason is None

    def test_window_closes_on_payment(self):
        decision = can_cancel(self._open(), [_transaction()], CREATED + timedelta(hours=2))

        assert not decision.allowed
        assert decision.reason == "transaction déjà payée"

    def test_window_closes_after_24_hours(self):
        decision = can_cancel(self._open(), [], CREATED + timedelta(hours=24))

        assert not decision.allowed

    def test_pending_reservation_window_runs_from_creation(self):
        reservation = self._open(status=ReservationStatus.PENDING, confirmed_at=None)

        assert can_cancel(reservation, [], CREATED + timedelta(hours=23)).allowed
        assert not can_cancel(reservation, [], CREATED + timedelta(hours=25)).allowed

    def test_closed_reservation_cannot_be_cancelled(self):
        decision = can_cancel(self._open(status=ReservationStatus.CANCELLED), [], CREATED)

        assert not decision.allowed

    def test_arrival_or_cash_close_the_window(self):
        now = CREATED + timedelta(hours=1)

        assert not can_cancel(self._open(arrival_confirmation=True), [], now).allowed
        assert not can_cancel(self._open(espece_confirmation=True), [], now).allowed

    def test_only_latest_transaction_counts(self):
        transactions = [
            _transaction(TransactionStatus.PAID, CREATED),
            _transaction(TransactionStatus.REFUNDED, CREATED + timedelta(minutes=5)),
        ]

        assert latest_transaction(transactions).status == TransactionStatus.REFUNDED
        assert can_cancel(self._open(), transactions, CREATED + timedelta(hours=1)).allowed


class TestOwnerActions:
    def test_cash_confirmation_needs_confirmed_reservation(self):
        assert can_mark_cash_confirmed(_reservation(espece_confirmation=False))
        assert not can_mark_cash_confirmed(_reservation(espece_confirmation=False, status=ReservationStatus.PENDING))
        assert not can_mark_cash_confirmed(_reservation())

    def test_arrival_confirmation_only_once(self):
        assert can_confirm_arrival(_reservation(arrival_confirmation=False))
        assert not can_confirm_arrival(_reservation())

    def test_contact_revealed_only_when_confirmed_and_paid(self):
        assert can_reveal_contact(_reservation(), [_transaction()])
        assert not can_reveal_contact(_reservation(), [_transaction(TransactionStatus.PENDING)])
        assert not can_reveal_contact(_reservation(status=ReservationStatus.PENDING), [_transaction()])


class TestEarnings:
    def test_month_buckets_by_start_day(self):
        reservations = [
            _reservation(id="r-1"),
            _reservation(id="r-2", start_date=date(2024, 6, 10), end_date=date(2024, 6, 11)),
            _reservation(id="r-3", start_date=date(2024, 6, 20), espece_confirmation=False),
            _reservation(id="r-4", start_date=date(2024, 7, 1)),
        ]
        transactions = {r.id: [_transaction(reservation_id=r.id)] for r in reservations}

        report = aggregate_earnings(reservations, transactions, Granularity.MONTH, date(2024, 6, 15))

        assert len(report.labels) == 30
        assert report.values[9] == Decimal("360")
        assert report.counts[9] == 2
        assert report.values[19] == Decimal("0")
        assert report.total_net == Decimal("360")
        assert report.total_commission == Decimal("40")
        assert report.reservation_count == 2

    def test_year_buckets_by_month(self):
        reservations = [_reservation(id="r-1"), _reservation(id="r-2", start_date=date(2024, 3, 2))]
        transactions = {r.id: [_transaction(reservation_id=r.id)] for r in reservations}

        report = aggregate_earnings(reservations, transactions, Granularity.YEAR, date(2024, 1, 1))

        assert report.labels[0] == "1"
        assert report.counts[2] == 1
        assert report.counts[5] == 1

    def test_day_buckets_by_creation_hour(self):
        reservations = [_reservation(id="r-1")]
        transactions = {"r-1": [_transaction()]}

        report = aggregate_earnings(reservations, transactions, Granularity.DAY, date(2024, 6, 10))

        assert len(report.labels) == 24
        assert report.counts[9] == 1
