from decimal import Decimal

import pytest

from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.reservation_code import ReservationCode


class TestMoney:
    def test_add_and_multiply(self):
        total = Money(Decimal("100"), "XOF") * 3 + Money(Decimal("55"), "XOF")

        assert total.amount == Decimal("355")
        assert str(total) == "355 XOF"

    def test_minus_clamped_never_goes_negative(self):
        result = Money(Decimal("10"), "XOF").minus_clamped(Money(Decimal("30"), "XOF"))

        assert result.is_zero()

    def test_rejects_mixed_currencies(self):
        with pytest.raises(ValueError):
            Money(Decimal("1"), "XOF") + Money(Decimal("1"), "EUR")

    def test_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money(Decimal("-1"), "XOF")


class TestReservationCode:
    def test_generated_code_is_well_formed(self):
        code = ReservationCode.generate("tg")

        assert code.value.startswith("TG-")
        assert code.is_well_formed()

    def test_generated_codes_differ(self):
        codes = {ReservationCode.generate().value for _ in range(50)}

        assert len(codes) == 50
