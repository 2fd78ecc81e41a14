from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import AsyncSessionLocal
from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock, SystemClock
from marketplace.application.interfaces.id_generator import IdGenerator, RealIdGenerator
from marketplace.application.use_cases.cancel_reservation import CancelReservationUseCase
from marketplace.application.use_cases.confirm_arrival import ConfirmArrivalUseCase
from marketplace.application.use_cases.confirm_cash import ConfirmCashUseCase
from marketplace.application.use_cases.confirm_reservation import ConfirmReservationUseCase
from marketplace.application.use_cases.create_booking import CreateBookingUseCase
from marketplace.application.use_cases.ensure_conversation import EnsureConversationUseCase
from marketplace.application.use_cases.fetch_messages import FetchMessagesUseCase
from marketplace.application.use_cases.get_availability import GetAvailabilityUseCase
from marketplace.application.use_cases.get_earnings import GetEarningsUseCase
from marketplace.application.use_cases.get_negotiation_state import GetNegotiationStateUseCase
from marketplace.application.use_cases.get_reservation_details import GetReservationDetailsUseCase
from marketplace.application.use_cases.list_conversations import ListConversationsUseCase
from marketplace.application.use_cases.manage_overrides import DeleteOverrideUseCase, UpsertOverrideUseCase
from marketplace.application.use_cases.propose_offer import ProposeOfferUseCase
from marketplace.application.use_cases.quote_price import QuotePriceUseCase
from marketplace.application.use_cases.respond_to_offer import RespondToOfferUseCase
from marketplace.application.use_cases.send_text import SendTextUseCase
from marketplace.config import Settings, get_settings
from marketplace.infrastructure.db.repositories import (
    ConversationRepoSQL,
    IdempotencyRepoSQL,
    ListingRepoSQL,
    MessageRepoSQL,
    OverrideRepoSQL,
    ReservationRepoSQL,
    TransactionRepoSQL,
    UserRepoSQL,
)
from marketplace.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from marketplace.infrastructure.in_memory import (
    InMemoryChangeNotifier,
    InMemoryConversationRepo,
    InMemoryIdempotencyRepo,
    InMemoryListingRepo,
    InMemoryMessageRepo,
    InMemoryOverrideRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryTransactionRepo,
    InMemoryUserRepo,
)


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def get_clock() -> Clock:
    return SystemClock()


@lru_cache(maxsize=1)
def get_id_generator() -> IdGenerator:
    return RealIdGenerator()


@lru_cache(maxsize=1)
def get_notifier() -> ChangeNotifier:
    return InMemoryChangeNotifier()


@lru_cache(maxsize=1)
def _in_memory_bundle():
    return {
        "listing_repo": InMemoryListingRepo(),
        "override_repo": InMemoryOverrideRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "transaction_repo": InMemoryTransactionRepo(),
        "conversation_repo": InMemoryConversationRepo(),
        "message_repo": InMemoryMessageRepo(),
        "user_repo": InMemoryUserRepo(),
        "idempotency_repo": InMemoryIdempotencyRepo(),
        "tx_manager": InMemoryTransactionManager(),
    }


def _sql_bundle(session: AsyncSession):
    return {
        "listing_repo": ListingRepoSQL(session),
        "override_repo": OverrideRepoSQL(session),
        "reservation_repo": ReservationRepoSQL(session),
        "transaction_repo": TransactionRepoSQL(session),
        "conversation_repo": ConversationRepoSQL(session),
        "message_repo": MessageRepoSQL(session),
        "user_repo": UserRepoSQL(session),
        "idempotency_repo": IdempotencyRepoSQL(session),
        "tx_manager": SQLAlchemyTransactionManager(session),
    }


def build_use_cases(bundle: dict, settings: Settings, clock: Clock, ids: IdGenerator, notifier: ChangeNotifier):
    get_availability = GetAvailabilityUseCase(
        listing_repo=bundle["listing_repo"],
        reservation_repo=bundle["reservation_repo"],
        override_repo=bundle["override_repo"],
        clock=clock,
        horizon_months=settings.availability_horizon_months,
    )
    return {
        "get_availability": get_availability,
        "quote_price": QuotePriceUseCase(
            listing_repo=bundle["listing_repo"],
            get_availability=get_availability,
            service_fee_per_unit=settings.service_fee_per_unit,
        ),
        "upsert_override": UpsertOverrideUseCase(
            listing_repo=bundle["listing_repo"],
            override_repo=bundle["override_repo"],
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "delete_override": DeleteOverrideUseCase(
            listing_repo=bundle["listing_repo"],
            override_repo=bundle["override_repo"],
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "ensure_conversation": EnsureConversationUseCase(
            listing_repo=bundle["listing_repo"],
            conversation_repo=bundle["conversation_repo"],
            id_generator=ids,
            clock=clock,
            transaction_manager=bundle["tx_manager"],
        ),
        "list_conversations": ListConversationsUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
        ),
        "fetch_messages": FetchMessagesUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
        ),
        "send_text": SendTextUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
            id_generator=ids,
            clock=clock,
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "propose_offer": ProposeOfferUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
            listing_repo=bundle["listing_repo"],
            id_generator=ids,
            clock=clock,
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "respond_to_offer": RespondToOfferUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
            listing_repo=bundle["listing_repo"],
            id_generator=ids,
            clock=clock,
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
            typed_offer_responses=settings.typed_offer_responses,
            default_currency=settings.default_currency,
        ),
        "get_negotiation_state": GetNegotiationStateUseCase(
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
            listing_repo=bundle["listing_repo"],
            clock=clock,
            window_hours=settings.offer_window_hours,
            warning_hours=settings.offer_warning_hours,
        ),
        "create_booking": CreateBookingUseCase(
            listing_repo=bundle["listing_repo"],
            reservation_repo=bundle["reservation_repo"],
            transaction_repo=bundle["transaction_repo"],
            conversation_repo=bundle["conversation_repo"],
            message_repo=bundle["message_repo"],
            idempotency_repo=bundle["idempotency_repo"],
            transaction_manager=bundle["tx_manager"],
            get_availability=get_availability,
            id_generator=ids,
            clock=clock,
            notifier=notifier,
            service_fee_per_unit=settings.service_fee_per_unit,
            code_prefix=settings.reservation_code_prefix,
            max_code_attempts=settings.reservation_code_max_attempts,
            offer_window_hours=settings.offer_window_hours,
        ),
        "get_reservation": GetReservationDetailsUseCase(
            reservation_repo=bundle["reservation_repo"],
            transaction_repo=bundle["transaction_repo"],
            listing_repo=bundle["listing_repo"],
            user_repo=bundle["user_repo"],
            clock=clock,
            window_hours=settings.cancellation_window_hours,
        ),
        "confirm_reservation": ConfirmReservationUseCase(
            reservation_repo=bundle["reservation_repo"],
            listing_repo=bundle["listing_repo"],
            clock=clock,
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "cancel_reservation": CancelReservationUseCase(
            reservation_repo=bundle["reservation_repo"],
            transaction_repo=bundle["transaction_repo"],
            listing_repo=bundle["listing_repo"],
            clock=clock,
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
            window_hours=settings.cancellation_window_hours,
        ),
        "confirm_cash": ConfirmCashUseCase(
            reservation_repo=bundle["reservation_repo"],
            listing_repo=bundle["listing_repo"],
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "confirm_arrival": ConfirmArrivalUseCase(
            reservation_repo=bundle["reservation_repo"],
            listing_repo=bundle["listing_repo"],
            notifier=notifier,
            transaction_manager=bundle["tx_manager"],
        ),
        "get_earnings": GetEarningsUseCase(
            listing_repo=bundle["listing_repo"],
            reservation_repo=bundle["reservation_repo"],
            transaction_repo=bundle["transaction_repo"],
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    if settings.use_in_memory:
        bundle = _in_memory_bundle()
    else:
        if not session:
            raise RuntimeError("DB session not available")
        bundle = _sql_bundle(session)
    return build_use_cases(bundle, settings, clock, ids, notifier)
