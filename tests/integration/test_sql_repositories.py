"""
Tests de los repositorios SQL contra SQLite in-memory.

Las escrituras pasan por SQLAlchemyTransactionManager igual que en los
casos de uso; las violaciones de restricciones deben dejar la sesión
utilizable.
"""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest

from marketplace.application.interfaces.idempotency_repo import IdempotencyRecord
from marketplace.domain.entities.availability_override import AvailabilityOverride
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.entities.message import Message, MessageType
from marketplace.domain.entities.principal import UserProfile
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.entities.transaction import Transaction, TransactionStatus
from marketplace.domain.errors import CheckViolationError, UniqueViolationError
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
from tests.conftest import BUYER_ID, LISTING_ID, NOW, OWNER_ID, make_listing

pytestmark = pytest.mark.integration


def _reservation(reservation_id: str, code: str, **overrides) -> Reservation:
    data = dict(
        id=reservation_id,
        reservation_code=code,
        listing_kind=ListingKind.LODGING,
        listing_id=LISTING_ID,
        user_id=BUYER_ID,
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 12),
        unit_price=Decimal("100"),
        total_price=Decimal("200"),
        price_espece=Decimal("200"),
        created_at=NOW,
    )
    data.update(overrides)
    return Reservation(**data)


class TestListingRepoSQL:
    @pytest.mark.asyncio
    async def test_round_trip_with_add_ons(self, db_session):
        repo = ListingRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.save(make_listing())

        listing = await repo.get(ListingKind.LODGING, LISTING_ID)

        assert listing.owner_id == OWNER_ID
        assert listing.base_price == Decimal("100")
        assert {a.id for a in listing.add_ons} == {"addon-a", "addon-b"}
        assert await repo.get(ListingKind.VEHICLE, LISTING_ID) is None

    @pytest.mark.asyncio
    async def test_save_replaces_add_ons(self, db_session):
        repo = ListingRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        async with tx.start():
            await repo.save(make_listing())
        async with tx.start():
            await repo.save(make_listing(add_ons=[]))

        listing = await repo.get(ListingKind.LODGING, LISTING_ID)
        owned = await repo.list_by_owner(OWNER_ID, ListingKind.LODGING)

        assert listing.add_ons == []
        assert [item.id for item in owned] == [LISTING_ID]


class TestReservationRepoSQL:
    @pytest.mark.asyncio
    async def test_duplicate_code_keeps_session_usable(self, db_session):
        repo = ReservationRepoSQL(db_session)

        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.create(_reservation("r1", "TG-AAAA-0001"))
            with pytest.raises(UniqueViolationError):
                await repo.create(_reservation("r2", "TG-AAAA-0001"))
            await repo.create(_reservation("r3", "TG-AAAA-0002"))

        assert await repo.get("r1") is not None
        assert await repo.get("r2") is None
        assert (await repo.get("r3")).reservation_code == "TG-AAAA-0002"

    @pytest.mark.asyncio
    async def test_update_checks_lock_version(self, db_session):
        repo = ReservationRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        async with tx.start():
            await repo.create(_reservation("r1", "TG-AAAA-0001"))

        reservation = await repo.get("r1")
        reservation.confirm(NOW + timedelta(hours=1))
        async with tx.start():
            assert await repo.update(reservation, expected_lock_version=0) is True
        async with tx.start():
            assert await repo.update(reservation, expected_lock_version=0) is False

        stored = await repo.get("r1")
        assert stored.status == ReservationStatus.CONFIRMED
        assert stored.lock_version == 1
        assert stored.confirmed_at == NOW + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, db_session):
        repo = ReservationRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.create(_reservation("r1", "TG-AAAA-0001"))
            await repo.create(_reservation("r2", "TG-AAAA-0002", status=ReservationStatus.CONFIRMED))

        confirmed = await repo.list_for_listing(
            ListingKind.LODGING, LISTING_ID, statuses=(ReservationStatus.CONFIRMED,)
        )

        assert [r.id for r in confirmed] == ["r2"]
        assert len(await repo.list_for_listings([LISTING_ID])) == 2


class TestTransactionRepoSQL:
    @pytest.mark.asyncio
    async def test_grouped_by_reservation(self, db_session):
        repo = TransactionRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.create(Transaction(id="t1", reservation_id="r1", user_id=BUYER_ID, created_at=NOW))
            await repo.create(
                Transaction(
                    id="t2",
                    reservation_id="r1",
                    user_id=BUYER_ID,
                    status=TransactionStatus.PAID,
                    created_at=NOW + timedelta(minutes=1),
                )
            )

        grouped = await repo.list_by_reservations(["r1", "r2"])

        assert sorted(t.id for t in grouped["r1"]) == ["t1", "t2"]
        assert "r2" not in grouped
        assert (await repo.list_by_reservation("r1"))[-1].is_paid


class TestConversationRepoSQL:
    @pytest.mark.asyncio
    async def test_unique_per_participants(self, db_session):
        repo = ConversationRepoSQL(db_session)
        conversation = Conversation(
            id="c1",
            listing_id=LISTING_ID,
            listing_kind=ListingKind.LODGING,
            buyer_id=BUYER_ID,
            seller_id=OWNER_ID,
            created_at=NOW,
        )

        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.create(conversation)
            with pytest.raises(UniqueViolationError):
                await repo.create(replace(conversation, id="c2"))

        found = await repo.find(LISTING_ID, ListingKind.LODGING, BUYER_ID, OWNER_ID)
        assert found.id == "c1"
        assert [c.id for c in await repo.list_for_participant(OWNER_ID)] == ["c1"]

    @pytest.mark.asyncio
    async def test_list_orders_by_last_activity(self, db_session):
        repo = ConversationRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        async with tx.start():
            for index, listing_id in enumerate(("a", "b")):
                await repo.create(
                    Conversation(
                        id=f"c-{listing_id}",
                        listing_id=listing_id,
                        listing_kind=ListingKind.LODGING,
                        buyer_id=BUYER_ID,
                        seller_id=OWNER_ID,
                        created_at=NOW + timedelta(minutes=index),
                    )
                )
        async with tx.start():
            await repo.touch("c-a", NOW + timedelta(hours=1))

        assert [c.id for c in await repo.list_for_participant(BUYER_ID)] == ["c-a", "c-b"]


class TestMessageRepoSQL:
    async def _seed(self, db_session) -> MessageRepoSQL:
        repo = MessageRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            for index in range(4):
                await repo.create(
                    Message(
                        id=f"m{index}",
                        conversation_id="c1",
                        sender_id=BUYER_ID,
                        type=MessageType.TEXT,
                        content=f"message {index}",
                        created_at=NOW + timedelta(minutes=index),
                    )
                )
        return repo

    @pytest.mark.asyncio
    async def test_chronological_pages(self, db_session):
        repo = await self._seed(db_session)

        first = await repo.list_for_conversation("c1", limit=2)
        older = await repo.list_for_conversation("c1", limit=2, before=NOW + timedelta(minutes=3))

        assert [m.id for m in first] == ["m0", "m1"]
        assert [m.id for m in older] == ["m1", "m2"]
        assert older[0].created_at == NOW + timedelta(minutes=1)

    @pytest.mark.asyncio
    async def test_latest_per_conversation(self, db_session):
        repo = await self._seed(db_session)

        latest = await repo.latest_for_conversations(["c1", "other"])

        assert list(latest) == ["c1"]
        assert latest["c1"].id == "m3"

    @pytest.mark.asyncio
    async def test_offer_meta_round_trip(self, db_session):
        repo = MessageRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.create(
                Message(
                    id="offer-1",
                    conversation_id="c1",
                    sender_id=BUYER_ID,
                    type=MessageType.OFFER,
                    content="Je propose 70 XOF",
                    price=Decimal("70"),
                    meta={"negotiation": True, "countered_from": "m0"},
                    created_at=NOW,
                )
            )

        offer = await repo.get("offer-1")

        assert offer.price == Decimal("70")
        assert offer.meta == {"negotiation": True, "countered_from": "m0"}

    @pytest.mark.asyncio
    async def test_same_timestamp_keeps_insertion_order(self, db_session):
        repo = MessageRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            for message_id in ("z-first", "a-second", "m-third"):
                await repo.create(
                    Message(
                        id=message_id,
                        conversation_id="c1",
                        sender_id=BUYER_ID,
                        type=MessageType.TEXT,
                        content=message_id,
                        created_at=NOW,
                    )
                )

        history = await repo.list_for_conversation("c1")
        page = await repo.list_for_conversation("c1", limit=2, before=NOW + timedelta(minutes=1))
        latest = await repo.latest_for_conversations(["c1"])

        assert [m.id for m in history] == ["z-first", "a-second", "m-third"]
        assert [m.id for m in page] == ["a-second", "m-third"]
        assert latest["c1"].id == "m-third"

    @pytest.mark.asyncio
    async def test_offer_accepts_a_single_response(self, db_session):
        repo = MessageRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        async with tx.start():
            await repo.create(
                Message(
                    id="offer-1",
                    conversation_id="c1",
                    sender_id=BUYER_ID,
                    type=MessageType.OFFER,
                    price=Decimal("70"),
                    meta={"kind": "initial_offer"},
                    created_at=NOW,
                )
            )
        async with tx.start():
            await repo.create(
                Message(
                    id="accept-1",
                    conversation_id="c1",
                    sender_id=OWNER_ID,
                    type=MessageType.OFFER_ACCEPT,
                    price=Decimal("70"),
                    meta={"accepted_from": "offer-1"},
                    created_at=NOW + timedelta(minutes=1),
                )
            )

        with pytest.raises(UniqueViolationError):
            async with tx.start():
                await repo.create(
                    Message(
                        id="reject-1",
                        conversation_id="c1",
                        sender_id=OWNER_ID,
                        type=MessageType.SYSTEM,
                        meta={"rejected_from": "offer-1", "action": "offer_reject"},
                        created_at=NOW + timedelta(minutes=1),
                    )
                )

        history = await repo.list_for_conversation("c1")
        assert [m.id for m in history] == ["offer-1", "accept-1"]


class TestOverrideRepoSQL:
    @pytest.mark.asyncio
    async def test_upsert_twice_keeps_one_row(self, db_session):
        repo = OverrideRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        day = date(2024, 6, 15)
        async with tx.start():
            await repo.upsert(AvailabilityOverride(ListingKind.LODGING, LISTING_ID, day, price=Decimal("90")))
        async with tx.start():
            await repo.upsert(AvailabilityOverride(ListingKind.LODGING, LISTING_ID, day, is_available=False))

        rows = await repo.list_for_listing(ListingKind.LODGING, LISTING_ID, date(2024, 6, 1), date(2024, 7, 1))

        assert len(rows) == 1
        assert rows[0].is_available is False
        assert rows[0].price is None

    @pytest.mark.asyncio
    async def test_negative_price_hits_check_constraint(self, db_session):
        repo = OverrideRepoSQL(db_session)

        with pytest.raises(CheckViolationError):
            async with SQLAlchemyTransactionManager(db_session).start():
                await repo.upsert(
                    AvailabilityOverride(ListingKind.LODGING, LISTING_ID, date(2024, 6, 15), price=Decimal("-5"))
                )

        assert await repo.list_for_listing(ListingKind.LODGING, LISTING_ID, date(2024, 6, 1), date(2024, 7, 1)) == []

    @pytest.mark.asyncio
    async def test_delete_reports_rowcount(self, db_session):
        repo = OverrideRepoSQL(db_session)
        tx = SQLAlchemyTransactionManager(db_session)
        day = date(2024, 6, 15)
        async with tx.start():
            await repo.upsert(AvailabilityOverride(ListingKind.LODGING, LISTING_ID, day, is_available=False))

        async with tx.start():
            assert await repo.delete(ListingKind.LODGING, LISTING_ID, day) is True
        async with tx.start():
            assert await repo.delete(ListingKind.LODGING, LISTING_ID, day) is False


class TestUserAndIdempotencyRepoSQL:
    @pytest.mark.asyncio
    async def test_user_profile(self, db_session):
        repo = UserRepoSQL(db_session)
        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.save(UserProfile(id=OWNER_ID, full_name="Kossi", email="owner@example.com"))

        profile = await repo.get(OWNER_ID)

        assert profile.email == "owner@example.com"
        assert profile.phone is None
        assert await repo.get("missing") is None

    @pytest.mark.asyncio
    async def test_idempotency_key_is_unique(self, db_session):
        repo = IdempotencyRepoSQL(db_session)
        record = IdempotencyRecord(
            scope="BOOKING_CREATE",
            idem_key="key-1",
            request_hash="abc",
            response_json={"reservation_id": "r1"},
            http_status=201,
            reference_id="r1",
        )

        async with SQLAlchemyTransactionManager(db_session).start():
            await repo.save(record)
            with pytest.raises(UniqueViolationError):
                await repo.save(record)

        stored = await repo.get("BOOKING_CREATE", "key-1")
        assert stored.response_json == {"reservation_id": "r1"}
        assert await repo.get("BOOKING_CREATE", "other") is None
