"""Entidad Listing - anuncio de alojamiento, vehículo o experiencia."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from marketplace.domain.value_objects.money import Money


class ListingKind(str, Enum):
    """Tipos de anuncio."""

    LODGING = "lodging"
    VEHICLE = "vehicle"
    EXPERIENCE = "experience"


class RentalUnit(str, Enum):
    """Unidad de alquiler en la que se expresa el precio base."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PricingModel(str, Enum):
    """Modelo de precio de un extra."""

    PER_NIGHT = "per_night"
    PER_STAY = "per_stay"


@dataclass
class AddOn:
    """Extra opcional de un anuncio (limpieza, desayuno, silla de bebé...)."""

    id: str
    name: str
    price: Decimal = Decimal("0")
    pricing_model: PricingModel = PricingModel.PER_STAY


@dataclass
class Listing:
    """
    Anuncio publicado por un propietario.

    Inmutable a efectos de precio salvo por ediciones explícitas del propietario.
    """

    id: str
    kind: ListingKind
    owner_id: str
    title: str = ""
    base_price: Decimal = Decimal("0")
    currency_code: str = "XOF"
    rental_unit: RentalUnit = RentalUnit.DAY
    add_ons: list[AddOn] = field(default_factory=list)

    @property
    def base_price_money(self) -> Money:
        return Money(amount=self.base_price, currency_code=self.currency_code)

    def is_owned_by(self, principal_id: str) -> bool:
        return self.owner_id == principal_id
