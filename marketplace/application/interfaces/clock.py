"""Interface Clock - Puerto para abstracción de tiempo."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """
    Puerto para abstracción del tiempo del sistema.

    Las ventanas de 24 h y 48 h se recalculan siempre a partir de este reloj,
    lo que permite fijar el tiempo en pruebas.
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        Retorna la fecha/hora actual.

        Returns:
            datetime con la hora actual (timezone-aware UTC).
        """
        raise NotImplementedError

    def today(self) -> date:
        """Fecha actual en UTC."""
        return self.now().date()


class SystemClock(Clock):
    """Implementación real que usa el reloj del sistema."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """
    Implementación fake para testing.

    Permite fijar y avanzar el tiempo para pruebas deterministas.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Args:
            fixed_time: Tiempo fijo a retornar. Si es None, usa el tiempo real inicial.
        """
        self._fixed_time = fixed_time or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = new_time

    def advance(self, seconds: int = 0, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        """
        Avanza el tiempo fijo.

        Args:
            seconds: Segundos a avanzar.
            minutes: Minutos a avanzar.
            hours: Horas a avanzar.
            days: Días a avanzar.
        """
        delta = timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
        self._fixed_time = self._fixed_time + delta
