"""Controlador de selección de rango en el calendario de reservas."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from marketplace.domain.services.availability import AvailabilitySnapshot
from marketplace.domain.value_objects.stay_range import StayRange


@dataclass
class CalendarSelection:
    """
    Selección de dos toques sobre el calendario.

    El primer toque fija la llegada; el segundo la salida. Tocar una fecha
    bloqueada o pasada no hace nada. Nunca lanza excepciones por toques
    desordenados.
    """

    start: date | None = None
    end: date | None = None
    start_override_price: Decimal | None = None

    def tap(self, day: date, today: date, snapshot: AvailabilitySnapshot) -> None:
        if day < today or snapshot.is_disabled(day):
            return

        if self.start is None or self.end is not None:
            self.start = day
            self.end = None
            self.start_override_price = snapshot.override_price(day)
            return

        if day < self.start:
            self.start = day
            self.start_override_price = snapshot.override_price(day)
        else:
            self.end = day

    def reset(self) -> None:
        self.start = None
        self.end = None
        self.start_override_price = None

    def confirm(self) -> StayRange | None:
        """Rango confirmado; un solo día produce end = start (1 unidad)."""
        if self.start is None:
            return None
        return StayRange(start=self.start, end=self.end or self.start)
