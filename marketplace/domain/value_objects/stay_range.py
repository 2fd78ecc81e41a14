"""Value Object StayRange - rango de fechas de una estancia o alquiler."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayRange:
    """
    Value Object inmutable que representa un rango de fechas [start, end).

    La fecha final es exclusiva para ocupación: el día de salida queda libre.
    Una reservación guardada con end <= start (reserva de un solo día
    representada de forma degenerada) ocupa únicamente el día de inicio.

    Attributes:
        start: Fecha de llegada.
        end: Fecha de salida (exclusiva).
    """

    start: date
    end: date

    @property
    def exclusive_end(self) -> date:
        """Fin exclusivo efectivo, aplicando la regla del día único."""
        if self.end <= self.start:
            return self.start + ONE_DAY
        return self.end

    @property
    def units(self) -> int:
        """
        Número de unidades facturables (noches / días).

        Regla de negocio: max(1, días entre start y end); un solo día = 1.
        """
        return max(1, (self.end - self.start).days)

    def occupied_dates(self) -> Iterator[date]:
        """Itera cada fecha ocupada en [start, exclusive_end)."""
        current = self.start
        end = self.exclusive_end
        while current < end:
            yield current
            current += ONE_DAY

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def single_day(cls, day: date) -> "StayRange":
        """Rango de un solo día (end = start)."""
        return cls(start=day, end=day)
