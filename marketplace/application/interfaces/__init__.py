"""Puertos de la capa de aplicación."""

from marketplace.application.interfaces.change_notifier import ChangeEvent, ChangeNotifier
from marketplace.application.interfaces.clock import Clock, FakeClock, SystemClock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import FakeIdGenerator, IdGenerator, RealIdGenerator
from marketplace.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.override_repo import OverrideRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.application.interfaces.user_repo import UserRepo

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "Clock",
    "FakeClock",
    "SystemClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
    "IdempotencyRecord",
    "IdempotencyRepo",
    "ListingRepo",
    "OverrideRepo",
    "ReservationRepo",
    "TransactionRepo",
    "ConversationRepo",
    "MessageRepo",
    "UserRepo",
    "TransactionManager",
]
