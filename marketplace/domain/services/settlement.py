"""
Elegibilidad y liquidación de reservaciones.

Reglas puras: elegibilidad para ingresos, ventana de cancelación,
confirmaciones de efectivo y llegada, visibilidad del contacto y la
agregación de ingresos por año, mes o día.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence

from marketplace.domain.constants import CANCELLATION_WINDOW_HOURS
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.entities.transaction import Transaction


class Granularity(str, Enum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"


@dataclass(frozen=True)
class CancellationDecision:
    allowed: bool
    reason: str | None = None


@dataclass
class EarningsReport:
    """
    Ingresos netos agregados en cubetas.

    Attributes:
        granularity: year | month | day.
        labels: Etiqueta de cada cubeta (mes, día del mes, hora).
        values: Ingreso neto por cubeta.
        counts: Número de reservaciones por cubeta.
        total_net: Suma de ingresos netos.
        total_commission: Suma de comisiones.
        reservation_count: Reservaciones elegibles en el periodo.
    """

    granularity: Granularity
    labels: list[str] = field(default_factory=list)
    values: list[Decimal] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)
    total_net: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    reservation_count: int = 0


def latest_transaction(transactions: Iterable[Transaction]) -> Transaction | None:
    dated = [t for t in transactions if t.created_at is not None]
    if not dated:
        return None
    return max(dated, key=lambda t: t.created_at)


def is_eligible_for_payout(reservation: Reservation, transactions: Iterable[Transaction]) -> bool:
    """confirmada ∧ llegada confirmada ∧ alguna transacción pagada ∧ efectivo ok."""
    paid = any(t.is_paid for t in transactions)
    cash_ok = not reservation.cash_due or reservation.espece_confirmation
    return reservation.is_confirmed and reservation.arrival_confirmation and paid and cash_ok


def cancellation_deadline(
    reservation: Reservation, window_hours: int = CANCELLATION_WINDOW_HOURS
) -> datetime | None:
    anchor = reservation.cancellation_anchor
    if anchor is None:
        return None
    return anchor + timedelta(hours=window_hours)


def can_cancel(
    reservation: Reservation,
    transactions: Iterable[Transaction],
    now: datetime,
    window_hours: int = CANCELLATION_WINDOW_HOURS,
) -> CancellationDecision:
    if reservation.is_closed:
        return CancellationDecision(False, f"réservation {reservation.status.value}")
    deadline = cancellation_deadline(reservation, window_hours)
    if deadline is None or now >= deadline:
        return CancellationDecision(False, "délai d'annulation dépassé")
    latest = latest_transaction(transactions)
    if latest is not None and latest.is_paid:
        return CancellationDecision(False, "transaction déjà payée")
    if reservation.espece_confirmation:
        return CancellationDecision(False, "espèces déjà confirmées")
    if reservation.arrival_confirmation:
        return CancellationDecision(False, "arrivée déjà confirmée")
    return CancellationDecision(True)


def can_mark_cash_confirmed(reservation: Reservation) -> bool:
    """No depende de que haya efectivo pendiente."""
    return reservation.is_confirmed and not reservation.espece_confirmation


def can_confirm_arrival(reservation: Reservation) -> bool:
    return reservation.status == ReservationStatus.CONFIRMED and not reservation.arrival_confirmation


def can_reveal_contact(reservation: Reservation, transactions: Iterable[Transaction]) -> bool:
    latest = latest_transaction(transactions)
    return reservation.is_confirmed and latest is not None and latest.is_paid


def period_bounds(granularity: Granularity, cursor: date) -> tuple[date, date]:
    """Rango [inicio, fin) del periodo que contiene al cursor."""
    if granularity == Granularity.YEAR:
        return date(cursor.year, 1, 1), date(cursor.year + 1, 1, 1)
    if granularity == Granularity.MONTH:
        last = calendar.monthrange(cursor.year, cursor.month)[1]
        return date(cursor.year, cursor.month, 1), date(cursor.year, cursor.month, last) + timedelta(days=1)
    return cursor, cursor + timedelta(days=1)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def aggregate_earnings(
    reservations: Sequence[Reservation],
    transactions_by_reservation: dict[str, Sequence[Transaction]],
    granularity: Granularity,
    cursor: date,
) -> EarningsReport:
    """
    Agrega ingresos netos (total - comisión) de reservaciones elegibles.

    El periodo se filtra por start_date. Año: 12 cubetas por mes de inicio;
    mes: una cubeta por día; día: 24 cubetas por hora de created_at.
    """
    start, end = period_bounds(granularity, cursor)

    if granularity == Granularity.YEAR:
        labels = [str(m) for m in range(1, 13)]
    elif granularity == Granularity.MONTH:
        labels = [str(d) for d in range(1, calendar.monthrange(cursor.year, cursor.month)[1] + 1)]
    else:
        labels = [f"{h:02d}" for h in range(24)]

    report = EarningsReport(
        granularity=granularity,
        labels=labels,
        values=[Decimal("0")] * len(labels),
        counts=[0] * len(labels),
    )

    for reservation in reservations:
        if not (start <= reservation.start_date < end):
            continue
        transactions = transactions_by_reservation.get(reservation.id, ())
        if not is_eligible_for_payout(reservation, transactions):
            continue

        if granularity == Granularity.YEAR:
            index = reservation.start_date.month - 1
        elif granularity == Granularity.MONTH:
            index = reservation.start_date.day - 1
        else:
            if reservation.created_at is None:
                continue
            index = _as_utc(reservation.created_at).hour

        net = reservation.net_amount
        report.values[index] += net
        report.counts[index] += 1
        report.total_net += net
        report.total_commission += reservation.commission
        report.reservation_count += 1

    return report
