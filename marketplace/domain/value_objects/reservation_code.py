"""Value Object ReservationCode - código legible único de reservación."""

import re
import secrets
import string
from dataclasses import dataclass

from marketplace.domain.constants import RESERVATION_CODE_PREFIX


@dataclass(frozen=True)
class ReservationCode:
    """
    Value Object inmutable que representa el código de una reservación.

    Formato: PREFIX-XXXX-YYYY en mayúsculas alfanuméricas (ej: TG-4K2Q-M9ZD).
    Solo se garantiza unicidad; no hay contrato de parseo.
    """

    value: str

    GROUP_LENGTH = 4
    ALLOWED_CHARS = string.ascii_uppercase + string.digits
    PATTERN = re.compile(r"^[A-Z0-9]+-[A-Z0-9]{4}-[A-Z0-9]{4}$")

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("reservation_code no puede estar vacío")

        if len(self.value) > 50:
            raise ValueError(f"reservation_code excede 50 caracteres: {len(self.value)}")

    def __str__(self) -> str:
        return self.value

    def is_well_formed(self) -> bool:
        return bool(self.PATTERN.match(self.value))

    @classmethod
    def generate(cls, prefix: str = RESERVATION_CODE_PREFIX) -> "ReservationCode":
        """Genera un nuevo código aleatorio PREFIX-XXXX-YYYY."""
        groups = [
            "".join(secrets.choice(cls.ALLOWED_CHARS) for _ in range(cls.GROUP_LENGTH))
            for _ in range(2)
        ]
        return cls(value="-".join([prefix.upper(), *groups]))

    @classmethod
    def from_string(cls, value: str) -> "ReservationCode":
        """Crea un ReservationCode desde un string existente."""
        return cls(value=value.upper().strip())
