"""Cálculo de precios de una estancia."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from marketplace.domain.entities.listing import AddOn, PricingModel
from marketplace.domain.value_objects.money import Money
from marketplace.domain.value_objects.stay_range import StayRange


@dataclass(frozen=True)
class AddOnLine:
    """Extra seleccionado con su total ya calculado."""

    add_on_id: str
    name: str
    price: Decimal
    pricing_model: PricingModel
    total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.add_on_id,
            "name": self.name,
            "price": str(self.price),
            "pricing_model": self.pricing_model.value,
            "total": str(self.total),
        }


@dataclass(frozen=True)
class PriceQuote:
    """
    Resultado del cálculo de precio.

    Attributes:
        units: Unidades facturables (noches / días), mínimo 1.
        unit_price: Precio unitario efectivo aplicado.
        base_total: unit_price * units.
        add_ons_total: Suma de los extras seleccionados.
        grand_total: base_total + add_ons_total.
        service_fee_per_unit: Comisión por unidad configurada.
        service_fee_total: Comisión total (se cobra en la app).
        amount_due_now: Monto a pagar en la app.
        amount_due_in_person: Monto a pagar en efectivo (nunca negativo).
    """

    units: int
    unit_price: Money
    base_total: Money
    add_ons_total: Money
    grand_total: Money
    service_fee_per_unit: Money
    service_fee_total: Money
    amount_due_now: Money
    amount_due_in_person: Money
    add_on_lines: tuple[AddOnLine, ...] = field(default_factory=tuple)

    @property
    def currency_code(self) -> str:
        return self.grand_total.currency_code


def resolve_unit_price(
    base_price: Decimal,
    override_price: Decimal | None = None,
    negotiated_price: Decimal | None = None,
) -> Decimal:
    """Override de la fecha de inicio > precio negociado > precio base."""
    if override_price is not None:
        return Decimal(override_price)
    if negotiated_price is not None:
        return Decimal(negotiated_price)
    return Decimal(base_price)


def price_add_ons(add_ons: Iterable[AddOn], units: int) -> list[AddOnLine]:
    lines = []
    for add_on in add_ons:
        price = Decimal(add_on.price)
        total = price * units if add_on.pricing_model == PricingModel.PER_NIGHT else price
        lines.append(
            AddOnLine(
                add_on_id=add_on.id,
                name=add_on.name,
                price=price,
                pricing_model=add_on.pricing_model,
                total=total,
            )
        )
    return lines


def compute_quote(
    stay: StayRange,
    unit_price: Decimal,
    add_ons: Iterable[AddOn] = (),
    service_fee_per_unit: Decimal = Decimal("0"),
    currency_code: str = "XOF",
) -> PriceQuote:
    """
    Calcula el desglose completo de una estancia.

    Función pura y determinista: mismas entradas, mismo resultado.
    """
    units = stay.units
    unit = Money(amount=Decimal(unit_price), currency_code=currency_code)
    base_total = unit * units

    lines = price_add_ons(add_ons, units)
    add_ons_total = Money(
        amount=sum((line.total for line in lines), Decimal("0")),
        currency_code=currency_code,
    )
    grand_total = base_total + add_ons_total

    fee_per_unit = Money(amount=Decimal(service_fee_per_unit), currency_code=currency_code)
    service_fee_total = fee_per_unit * units

    return PriceQuote(
        units=units,
        unit_price=unit,
        base_total=base_total,
        add_ons_total=add_ons_total,
        grand_total=grand_total,
        service_fee_per_unit=fee_per_unit,
        service_fee_total=service_fee_total,
        amount_due_now=service_fee_total,
        amount_due_in_person=grand_total.minus_clamped(service_fee_total),
        add_on_lines=tuple(lines),
    )
