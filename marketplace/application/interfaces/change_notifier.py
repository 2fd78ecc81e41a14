"""Interface ChangeNotifier - notificación de cambios de filas."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

EVENT_INSERT = "INSERT"
EVENT_UPDATE = "UPDATE"
EVENT_DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """
    Cambio de una fila persistida.

    Attributes:
        table: Colección afectada (reservations, messages, ...).
        event: INSERT | UPDATE | DELETE.
        row: Representación serializable de la fila.
    """

    table: str
    event: str
    row: dict[str, Any] = field(default_factory=dict)


Subscriber = Callable[[ChangeEvent], Awaitable[None]]


class ChangeNotifier(ABC):
    """Puerto de publicación/suscripción; el transporte real queda fuera."""

    @abstractmethod
    async def publish(self, event: ChangeEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, table: str, subscriber: Subscriber) -> Callable[[], None]:
        """
        Registra un suscriptor para una tabla.

        Returns:
            Función que cancela la suscripción.
        """
        raise NotImplementedError
