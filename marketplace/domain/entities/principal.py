"""Identidad del solicitante y perfil de contacto."""

from dataclasses import dataclass

from marketplace.domain.errors import AuthenticationRequiredError


@dataclass(frozen=True)
class Principal:
    """Identidad autenticada que ejecuta una operación."""

    id: str

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise AuthenticationRequiredError()


@dataclass
class UserProfile:
    """Datos de contacto de un usuario (email/teléfono protegidos)."""

    id: str
    full_name: str = ""
    email: str | None = None
    phone: str | None = None
