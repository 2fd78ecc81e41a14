"""Interface IdGenerator - Puerto para generación de identificadores."""

import uuid
from abc import ABC, abstractmethod

from marketplace.domain.constants import RESERVATION_CODE_PREFIX
from marketplace.domain.value_objects.reservation_code import ReservationCode


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores únicos.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def new_id(self) -> str:
        """
        Genera un UUID v4 único.

        Returns:
            String con UUID en formato estándar.
        """
        raise NotImplementedError

    @abstractmethod
    def new_reservation_code(self, prefix: str = RESERVATION_CODE_PREFIX) -> str:
        """
        Genera un código de reservación PREFIX-XXXX-YYYY.

        La unicidad la garantiza el backend; el llamador reintenta ante colisión.
        """
        raise NotImplementedError


class RealIdGenerator(IdGenerator):
    """Implementación real: UUID4 y códigos aleatorios con ``secrets``."""

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def new_reservation_code(self, prefix: str = RESERVATION_CODE_PREFIX) -> str:
        return ReservationCode.generate(prefix).value


class FakeIdGenerator(IdGenerator):
    """
    Implementación fake para testing.

    Genera valores predecibles y permite encolar códigos concretos para
    forzar colisiones.
    """

    def __init__(self, prefix: str = "TEST"):
        self._prefix = prefix
        self._id_counter = 0
        self._code_counter = 0
        self._queued_codes: list[str] = []

    def new_id(self) -> str:
        self._id_counter += 1
        hex_value = f"{self._id_counter:032x}"
        return f"{hex_value[:8]}-{hex_value[8:12]}-{hex_value[12:16]}-{hex_value[16:20]}-{hex_value[20:]}"

    def new_reservation_code(self, prefix: str = RESERVATION_CODE_PREFIX) -> str:
        if self._queued_codes:
            return self._queued_codes.pop(0)
        self._code_counter += 1
        return f"{prefix}-{self._prefix[:4].upper():X<4}-{self._code_counter:04d}"

    def queue_codes(self, *codes: str) -> None:
        """Los próximos códigos a retornar, en orden."""
        self._queued_codes.extend(codes)

    def reset(self) -> None:
        self._id_counter = 0
        self._code_counter = 0
        self._queued_codes.clear()
