"""Resolución de disponibilidad: fechas bloqueadas y precio por fecha."""

import calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.value_objects.stay_range import StayRange

OCCUPYING = (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """
    Foto de disponibilidad de un anuncio.

    Los llamadores reemplazan la foto completa en cada lectura; nunca se
    aplican diferencias parciales.

    Attributes:
        disabled_dates: Fechas no reservables (reservas ∪ overrides cerrados).
        price_by_date: Precio override por fecha (solo overrides con precio).
    """

    disabled_dates: frozenset[date] = field(default_factory=frozenset)
    price_by_date: dict[date, Decimal] = field(default_factory=dict)

    def is_disabled(self, day: date) -> bool:
        return day in self.disabled_dates

    def override_price(self, day: date) -> Decimal | None:
        return self.price_by_date.get(day)

    def conflicting_dates(self, stay: StayRange) -> list[date]:
        """Fechas de la estancia que ya están bloqueadas."""
        return [day for day in stay.occupied_dates() if day in self.disabled_dates]


def overlapping_dates(stay: StayRange, reservations: Iterable[Reservation]) -> list[date]:
    """Fechas de la estancia ya ocupadas por reservas confirmadas o completadas."""
    occupied: set[date] = set()
    for reservation in reservations:
        if reservation.status in OCCUPYING:
            occupied.update(reservation.stay_range.occupied_dates())
    return [day for day in stay.occupied_dates() if day in occupied]


def add_months(day: date, months: int) -> date:
    """Suma meses ajustando al último día del mes cuando hace falta."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def resolve_unavailability(
    reservations: Iterable[Reservation],
    overrides: Iterable[AvailabilityOverride],
    today: date,
    horizon_months: int = 18,
) -> AvailabilitySnapshot:
    """
    Calcula la foto de disponibilidad.

    Args:
        reservations: Reservas del anuncio (se ignoran las que no ocupan).
        overrides: Overrides del anuncio.
        today: Fecha de referencia para el horizonte.
        horizon_months: Meses hacia adelante considerados para overrides.

    Returns:
        AvailabilitySnapshot con la unión de fechas bloqueadas y precios.
    """
    disabled: set[date] = set()

    for reservation in reservations:
        if reservation.status not in OCCUPYING:
            continue
        disabled.update(reservation.stay_range.occupied_dates())

    horizon = add_months(today, horizon_months)
    price_by_date: dict[date, Decimal] = {}
    for override in overrides:
        if override.date < today or override.date > horizon:
            continue
        if not override.is_available:
            disabled.add(override.date)
        if override.price is not None:
            price_by_date[override.date] = Decimal(override.price)

    return AvailabilitySnapshot(disabled_dates=frozenset(disabled), price_by_date=price_by_date)
