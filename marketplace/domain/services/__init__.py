"""Servicios de dominio puros (sin I/O)."""

from marketplace.domain.services.availability import (
    AvailabilitySnapshot,
    add_months,
    resolve_unavailability,
)
from marketplace.domain.services.calendar_selection import CalendarSelection
from marketplace.domain.services.negotiation import (
    ComposerMode,
    ReservationWindow,
    composer_mode,
    latest_unanswered_offer,
    merge_messages,
    message_preview,
    remaining,
    reservation_window,
    suggest_offer_prices,
)
from marketplace.domain.services.pricing import (
    AddOnLine,
    PriceQuote,
    compute_quote,
    resolve_unit_price,
)
from marketplace.domain.services.settlement import (
    CancellationDecision,
    EarningsReport,
    Granularity,
    aggregate_earnings,
    can_cancel,
    can_confirm_arrival,
    can_mark_cash_confirmed,
    can_reveal_contact,
    is_eligible_for_payout,
    latest_transaction,
)

__all__ = [
    "AvailabilitySnapshot",
    "add_months",
    "resolve_unavailability",
    "CalendarSelection",
    "ComposerMode",
    "ReservationWindow",
    "composer_mode",
    "latest_unanswered_offer",
    "merge_messages",
    "message_preview",
    "remaining",
    "reservation_window",
    "suggest_offer_prices",
    "AddOnLine",
    "PriceQuote",
    "compute_quote",
    "resolve_unit_price",
    "CancellationDecision",
    "EarningsReport",
    "Granularity",
    "aggregate_earnings",
    "can_cancel",
    "can_confirm_arrival",
    "can_mark_cash_confirmed",
    "can_reveal_contact",
    "is_eligible_for_payout",
    "latest_transaction",
]
