"""
Value Objects OfferMeta - metadatos etiquetados de los mensajes de oferta.

El campo ``meta`` de un mensaje se persiste como diccionario. Cada variante
conoce su forma serializada y ``parse_offer_meta`` reconstruye la variante a
partir del diccionario almacenado (incluidas las filas de tipo ``system`` que
llevan una clave ``action``).
"""

from dataclasses import dataclass
from typing import Any

ACTION_OFFER_ACCEPT = "offer_accept"
ACTION_OFFER_REJECT = "offer_reject"


@dataclass(frozen=True)
class OfferMeta:
    """Base de las variantes de metadatos."""

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class InitialOffer(OfferMeta):
    def to_dict(self) -> dict[str, Any]:
        return {"kind": "initial_offer"}


@dataclass(frozen=True)
class CounterOffer(OfferMeta):
    """Contraoferta dentro de una negociación abierta."""

    countered_from: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"negotiation": True}
        if self.countered_from:
            data["countered_from"] = self.countered_from
        return data


@dataclass(frozen=True)
class ReopenedOffer(OfferMeta):
    """Nueva oferta del comprador tras un rechazo; apunta a la oferta original."""

    reopened_from: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"negotiation": True, "reopened_from": self.reopened_from}


@dataclass(frozen=True)
class AcceptedOffer(OfferMeta):
    accepted_from: str

    def to_dict(self) -> dict[str, Any]:
        return {"accepted_from": self.accepted_from}


@dataclass(frozen=True)
class RejectedOffer(OfferMeta):
    rejected_from: str

    def to_dict(self) -> dict[str, Any]:
        return {"rejected_from": self.rejected_from}


@dataclass(frozen=True)
class SystemAction(OfferMeta):
    """
    Respuesta codificada como mensaje ``system`` cuando el backend no admite
    los tipos ``offer_accept`` / ``offer_reject``.
    """

    action: str
    source_id: str

    def to_dict(self) -> dict[str, Any]:
        key = "accepted_from" if self.action == ACTION_OFFER_ACCEPT else "rejected_from"
        return {key: self.source_id, "action": self.action}


def parse_offer_meta(meta: dict[str, Any] | None) -> OfferMeta | None:
    """Reconstruye la variante a partir del diccionario persistido."""
    if not meta:
        return None
    action = meta.get("action")
    if action in (ACTION_OFFER_ACCEPT, ACTION_OFFER_REJECT):
        source = meta.get("accepted_from") or meta.get("rejected_from") or ""
        return SystemAction(action=action, source_id=source)
    if meta.get("accepted_from"):
        return AcceptedOffer(accepted_from=meta["accepted_from"])
    if meta.get("rejected_from"):
        return RejectedOffer(rejected_from=meta["rejected_from"])
    if "reopened_from" in meta:
        return ReopenedOffer(reopened_from=meta.get("reopened_from"))
    if meta.get("negotiation"):
        return CounterOffer(countered_from=meta.get("countered_from"))
    if meta.get("kind") == "initial_offer":
        return InitialOffer()
    return None
