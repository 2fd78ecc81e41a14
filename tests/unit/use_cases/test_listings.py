"""Tests de disponibilidad, cotización y overrides por fecha."""

from datetime import date
from decimal import Decimal

import pytest

from marketplace.domain.entities.listing import ListingKind
from marketplace.domain.errors import ListingNotFoundError, NotAllowedError, ValidationError
from tests.conftest import LISTING_ID


class TestAvailability:
    @pytest.mark.asyncio
    async def test_empty_calendar(self, use_cases):
        snapshot = await use_cases["get_availability"].execute(ListingKind.LODGING, LISTING_ID)

        assert snapshot.disabled_dates == frozenset()
        assert snapshot.price_by_date == {}

    @pytest.mark.asyncio
    async def test_unknown_listing(self, use_cases):
        with pytest.raises(ListingNotFoundError):
            await use_cases["get_availability"].execute(ListingKind.LODGING, "missing")


class TestOverrides:
    @pytest.mark.asyncio
    async def test_owner_closes_a_day(self, use_cases, owner, notifier):
        await use_cases["upsert_override"].execute(
            owner, ListingKind.LODGING, LISTING_ID, date(2024, 6, 15), is_available=False
        )

        snapshot = await use_cases["get_availability"].execute(ListingKind.LODGING, LISTING_ID)
        assert snapshot.is_disabled(date(2024, 6, 15))
        assert notifier.published[-1].table == "availability_overrides"

    @pytest.mark.asyncio
    async def test_upsert_replaces_previous_value(self, use_cases, owner):
        day = date(2024, 6, 15)
        await use_cases["upsert_override"].execute(owner, ListingKind.LODGING, LISTING_ID, day, price=Decimal("90"))
        await use_cases["upsert_override"].execute(owner, ListingKind.LODGING, LISTING_ID, day, price=Decimal("120"))

        snapshot = await use_cases["get_availability"].execute(ListingKind.LODGING, LISTING_ID)
        assert snapshot.override_price(day) == Decimal("120")
        assert not snapshot.is_disabled(day)

    @pytest.mark.asyncio
    async def test_only_owner_edits(self, use_cases, buyer):
        with pytest.raises(NotAllowedError):
            await use_cases["upsert_override"].execute(
                buyer, ListingKind.LODGING, LISTING_ID, date(2024, 6, 15), is_available=False
            )
        with pytest.raises(NotAllowedError):
            await use_cases["delete_override"].execute(buyer, ListingKind.LODGING, LISTING_ID, date(2024, 6, 15))

    @pytest.mark.asyncio
    async def test_negative_price_is_rejected(self, use_cases, owner):
        with pytest.raises(ValidationError):
            await use_cases["upsert_override"].execute(
                owner, ListingKind.LODGING, LISTING_ID, date(2024, 6, 15), price=Decimal("-1")
            )

    @pytest.mark.asyncio
    async def test_delete_reports_whether_row_existed(self, use_cases, owner):
        day = date(2024, 6, 15)
        await use_cases["upsert_override"].execute(owner, ListingKind.LODGING, LISTING_ID, day, is_available=False)

        assert await use_cases["delete_override"].execute(owner, ListingKind.LODGING, LISTING_ID, day) is True
        assert await use_cases["delete_override"].execute(owner, ListingKind.LODGING, LISTING_ID, day) is False


class TestQuotePrice:
    @pytest.mark.asyncio
    async def test_quote_with_add_ons(self, use_cases):
        quote = await use_cases["quote_price"].execute(
            ListingKind.LODGING,
            LISTING_ID,
            date(2024, 6, 10),
            date(2024, 6, 13),
            add_on_ids=["addon-a", "addon-b"],
        )

        assert quote.units == 3
        assert quote.grand_total.amount == Decimal("355")

    @pytest.mark.asyncio
    async def test_override_price_wins_over_negotiated_price(self, use_cases, owner):
        await use_cases["upsert_override"].execute(
            owner, ListingKind.LODGING, LISTING_ID, date(2024, 6, 10), price=Decimal("80")
        )

        quote = await use_cases["quote_price"].execute(
            ListingKind.LODGING, LISTING_ID, date(2024, 6, 10), date(2024, 6, 12), negotiated_price=Decimal("60")
        )

        assert quote.unit_price.amount == Decimal("80")
        assert quote.grand_total.amount == Decimal("160")

    @pytest.mark.asyncio
    async def test_non_positive_negotiated_price(self, use_cases):
        with pytest.raises(ValidationError):
            await use_cases["quote_price"].execute(
                ListingKind.LODGING, LISTING_ID, date(2024, 6, 10), negotiated_price=Decimal("0")
            )
