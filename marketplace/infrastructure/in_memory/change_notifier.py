"""Notificador in-process de cambios de filas."""

import logging
from collections import deque
from typing import Callable

from marketplace.application.interfaces.change_notifier import ChangeEvent, ChangeNotifier, Subscriber

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100


class InMemoryChangeNotifier(ChangeNotifier):
    """
    Publica cada evento a los suscriptores de su tabla.

    Un suscriptor que falla se registra en el log y no impide la entrega al
    resto ni revierte la escritura ya confirmada. ``published`` conserva solo
    los últimos ``history_size`` eventos.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        self._subscribers: dict[str, list[Subscriber]] = {}
        self.published: deque[ChangeEvent] = deque(maxlen=history_size)

    async def publish(self, event: ChangeEvent) -> None:
        self.published.append(event)
        for subscriber in list(self._subscribers.get(event.table, [])):
            try:
                await subscriber(event)
            except Exception as exc:
                logger.error(
                    "Change subscriber failed",
                    exc_info=exc,
                    extra={"table": event.table, "event": event.event},
                )

    def subscribe(self, table: str, subscriber: Subscriber) -> Callable[[], None]:
        self._subscribers.setdefault(table, []).append(subscriber)

        def unsubscribe() -> None:
            subscribers = self._subscribers.get(table, [])
            if subscriber in subscribers:
                subscribers.remove(subscriber)

        return unsubscribe
