from marketplace.infrastructure.db.repositories.conversation_repo_sql import ConversationRepoSQL
from marketplace.infrastructure.db.repositories.idempotency_repo_sql import IdempotencyRepoSQL
from marketplace.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL
from marketplace.infrastructure.db.repositories.message_repo_sql import MessageRepoSQL
from marketplace.infrastructure.db.repositories.override_repo_sql import OverrideRepoSQL
from marketplace.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from marketplace.infrastructure.db.repositories.transaction_repo_sql import TransactionRepoSQL
from marketplace.infrastructure.db.repositories.user_repo_sql import UserRepoSQL

__all__ = [
    "ConversationRepoSQL",
    "IdempotencyRepoSQL",
    "ListingRepoSQL",
    "MessageRepoSQL",
    "OverrideRepoSQL",
    "ReservationRepoSQL",
    "TransactionRepoSQL",
    "UserRepoSQL",
]
