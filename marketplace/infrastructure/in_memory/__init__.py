"""Implementaciones in-memory (modo demo y testing)."""

from marketplace.infrastructure.in_memory.change_notifier import InMemoryChangeNotifier
from marketplace.infrastructure.in_memory.conversation_repo import InMemoryConversationRepo
from marketplace.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from marketplace.infrastructure.in_memory.listing_repo import InMemoryListingRepo
from marketplace.infrastructure.in_memory.message_repo import InMemoryMessageRepo
from marketplace.infrastructure.in_memory.override_repo import InMemoryOverrideRepo
from marketplace.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from marketplace.infrastructure.in_memory.transaction_manager import NoopTransactionManager as InMemoryTransactionManager
from marketplace.infrastructure.in_memory.transaction_repo import InMemoryTransactionRepo
from marketplace.infrastructure.in_memory.user_repo import InMemoryUserRepo

__all__ = [
    # Repositories
    "InMemoryListingRepo",
    "InMemoryOverrideRepo",
    "InMemoryReservationRepo",
    "InMemoryTransactionRepo",
    "InMemoryConversationRepo",
    "InMemoryMessageRepo",
    "InMemoryUserRepo",
    "InMemoryIdempotencyRepo",
    # Infrastructure
    "InMemoryChangeNotifier",
    "InMemoryTransactionManager",
]
