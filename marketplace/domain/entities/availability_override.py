"""Entidad AvailabilityOverride - excepción de disponibilidad/precio por fecha."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from marketplace.domain.entities.listing import ListingKind


@dataclass
class AvailabilityOverride:
    """
    Excepción por fecha definida por el propietario.

    Única por (listing_kind, listing_id, date). Es independiente de las
    reservaciones: un precio override nunca libera una fecha reservada.
    """

    listing_kind: ListingKind
    listing_id: str
    date: date
    is_available: bool = True
    price: Decimal | None = None
