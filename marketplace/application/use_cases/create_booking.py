import hashlib
import json
import logging
from decimal import Decimal
from typing import Any

from marketplace.application.dtos.booking_dto import BookingResultDTO, CreateBookingDTO
from marketplace.application.interfaces.change_notifier import EVENT_INSERT, ChangeEvent, ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import IdGenerator
from marketplace.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.application.use_cases.access import load_listing, require_principal
from marketplace.application.use_cases.get_availability import GetAvailabilityUseCase
from marketplace.application.use_cases.quote_price import select_add_ons, stay_for
from marketplace.domain.constants import (
    OFFER_RESERVATION_WINDOW_HOURS,
    RESERVATION_CODE_MAX_ATTEMPTS,
    RESERVATION_CODE_PREFIX,
)
from marketplace.domain.entities.listing import Listing
from marketplace.domain.entities.message import Message, MessageType, is_accept_msg
from marketplace.domain.entities.principal import Principal
from marketplace.domain.entities.reservation import Reservation, ReservationStatus
from marketplace.domain.entities.transaction import PaymentMethod, Transaction, TransactionStatus
from marketplace.domain.errors import (
    DatesUnavailableError,
    IdempotencyConflictError,
    InvalidDateRangeError,
    MessageNotFoundError,
    NotAllowedError,
    ReservationCodeExhaustedError,
    ReservationWindowClosedError,
    UniqueViolationError,
    ValidationError,
)
from marketplace.domain.services.negotiation import reservation_window
from marketplace.domain.services.pricing import PriceQuote, compute_quote, resolve_unit_price

IDEMPOTENCY_SCOPE = "BOOKING_CREATE"


def _hash_request(payload: dict[str, Any]) -> str:
    normalized = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(normalized.encode()).hexdigest()


class CreateBookingUseCase:
    """
    Checkout: crea la reservación y su transacción.

    El precio se recalcula en el servidor. El código de reservación se
    reintenta ante colisiones y la transacción fallida deshace la reservación.
    """

    def __init__(
        self,
        listing_repo: ListingRepo,
        reservation_repo: ReservationRepo,
        transaction_repo: TransactionRepo,
        conversation_repo: ConversationRepo,
        message_repo: MessageRepo,
        idempotency_repo: IdempotencyRepo,
        transaction_manager: TransactionManager,
        get_availability: GetAvailabilityUseCase,
        id_generator: IdGenerator,
        clock: Clock,
        notifier: ChangeNotifier,
        service_fee_per_unit: Decimal = Decimal("0"),
        code_prefix: str = RESERVATION_CODE_PREFIX,
        max_code_attempts: int = RESERVATION_CODE_MAX_ATTEMPTS,
        offer_window_hours: int = OFFER_RESERVATION_WINDOW_HOURS,
    ) -> None:
        self._listing_repo = listing_repo
        self._reservation_repo = reservation_repo
        self._transaction_repo = transaction_repo
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo
        self._idempotency_repo = idempotency_repo
        self._transaction_manager = transaction_manager
        self._get_availability = get_availability
        self._id_generator = id_generator
        self._clock = clock
        self._notifier = notifier
        self._service_fee_per_unit = service_fee_per_unit
        self._code_prefix = code_prefix
        self._max_code_attempts = max_code_attempts
        self._offer_window_hours = offer_window_hours
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal | None,
        request: CreateBookingDTO,
        idem_key: str | None = None,
    ) -> BookingResultDTO:
        principal = require_principal(principal)

        request_hash = None
        if idem_key:
            request_hash = _hash_request({"principal": principal.id, **request.fingerprint()})
            existing = await self._idempotency_repo.get(scope=IDEMPOTENCY_SCOPE, idem_key=idem_key)
            if existing:
                if existing.request_hash != request_hash:
                    raise IdempotencyConflictError(idem_key, IDEMPOTENCY_SCOPE)
                self._logger.info("Booking replayed", extra={"idem_key": idem_key})
                return BookingResultDTO.from_dict(existing.response_json)

        if request.guests_count < 1:
            raise ValidationError("guests_count", "au moins un voyageur")
        stay = stay_for(request.start_date, request.end_date)
        if stay.start < self._clock.today():
            raise InvalidDateRangeError(f"Impossible de réserver une date passée ({stay.start.isoformat()})")

        listing = await load_listing(self._listing_repo, request.listing_kind, request.listing_id)
        if listing.is_owned_by(principal.id):
            raise NotAllowedError("réserver", "vous êtes le propriétaire de l'annonce")
        add_ons = select_add_ons(listing, request.add_on_ids)

        negotiated_price = None
        if request.negotiated_from_offer_id:
            negotiated_price = await self._negotiated_price(principal, listing, request.negotiated_from_offer_id)

        snapshot = await self._get_availability.execute(request.listing_kind, request.listing_id)
        conflicts = snapshot.conflicting_dates(stay)
        if conflicts:
            raise DatesUnavailableError([day.isoformat() for day in conflicts])

        unit_price = resolve_unit_price(
            listing.base_price,
            override_price=snapshot.override_price(stay.start),
            negotiated_price=negotiated_price,
        )
        quote = compute_quote(
            stay,
            unit_price,
            add_ons,
            service_fee_per_unit=self._service_fee_per_unit,
            currency_code=listing.currency_code,
        )

        now = self._clock.now()
        reservation = Reservation(
            id=self._id_generator.new_id(),
            reservation_code="",
            listing_kind=listing.kind,
            listing_id=listing.id,
            user_id=principal.id,
            start_date=stay.start,
            end_date=stay.end,
            unit_price=quote.unit_price.amount,
            total_price=quote.grand_total.amount,
            commission=quote.service_fee_total.amount,
            price_espece=quote.amount_due_in_person.amount,
            currency_code=quote.currency_code,
            status=ReservationStatus.PENDING,
            guests_count=request.guests_count,
            guest_info=self._guest_info(quote, request.payment_method),
            source_offer_message_id=request.negotiated_from_offer_id,
            created_at=now,
        )
        online_amount = (
            quote.service_fee_total.amount
            if request.payment_method == PaymentMethod.SERVICE_FEE_ONLY
            else quote.grand_total.amount
        )
        transaction = Transaction(
            id=self._id_generator.new_id(),
            reservation_id=reservation.id,
            user_id=principal.id,
            amount=online_amount,
            commission=quote.service_fee_total.amount,
            status=TransactionStatus.PAID,
            payment_method=request.payment_method,
            created_at=now,
        )

        async with self._transaction_manager.start():
            await self._insert_with_unique_code(reservation)
            try:
                await self._transaction_repo.create(transaction)
            except Exception:
                await self._compensate(reservation)
                raise

            result = BookingResultDTO(
                reservation_id=reservation.id,
                reservation_code=reservation.reservation_code,
                transaction_id=transaction.id,
                status=reservation.status.value,
                units=quote.units,
                unit_price=reservation.unit_price,
                total_price=reservation.total_price,
                commission=reservation.commission,
                price_espece=reservation.price_espece,
                amount_paid_online=transaction.amount,
                currency_code=reservation.currency_code,
                source_offer_message_id=reservation.source_offer_message_id,
            )
            if idem_key:
                await self._idempotency_repo.save(
                    IdempotencyRecord(
                        scope=IDEMPOTENCY_SCOPE,
                        idem_key=idem_key,
                        request_hash=request_hash,
                        response_json=result.to_dict(),
                        http_status=201,
                        reference_id=reservation.id,
                    )
                )

        self._logger.info(
            "Booking created",
            extra={
                "reservation_id": reservation.id,
                "reservation_code": reservation.reservation_code,
                "listing_id": listing.id,
                "total_price": str(reservation.total_price),
            },
        )
        await self._notifier.publish(
            ChangeEvent(table="reservations", event=EVENT_INSERT, row=result.to_dict())
        )
        await self._notifier.publish(
            ChangeEvent(
                table="transactions",
                event=EVENT_INSERT,
                row={"id": transaction.id, "reservation_id": reservation.id, "status": transaction.status.value},
            )
        )
        return result

    async def _insert_with_unique_code(self, reservation: Reservation) -> None:
        for attempt in range(1, self._max_code_attempts + 1):
            reservation.reservation_code = self._id_generator.new_reservation_code(self._code_prefix)
            try:
                await self._reservation_repo.create(reservation)
                return
            except UniqueViolationError:
                self._logger.warning(
                    "Reservation code collision, retrying",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self._max_code_attempts,
                        "reservation_code": reservation.reservation_code,
                    },
                )
        raise ReservationCodeExhaustedError(self._max_code_attempts)

    async def _compensate(self, reservation: Reservation) -> None:
        try:
            await self._reservation_repo.delete(reservation.id)
        except Exception as exc:
            self._logger.error(
                "Compensating delete failed, reservation left without transaction",
                exc_info=exc,
                extra={"reservation_id": reservation.id},
            )

    async def _negotiated_price(self, principal: Principal, listing: Listing, message_id: str) -> Decimal:
        """
        Precio de una oferta aceptada dentro de su ventana de 48 h.

        Acepta el id del mensaje de aceptación o el de la oferta aceptada.
        """
        message = await self._message_repo.get(message_id)
        if message is None:
            raise MessageNotFoundError(message_id)
        conversation = await self._conversation_repo.get(message.conversation_id)
        if (
            conversation is None
            or not conversation.is_buyer(principal.id)
            or conversation.listing_id != listing.id
            or conversation.listing_kind != listing.kind
        ):
            raise NotAllowedError("réserver au prix négocié", "offre d'une autre conversation")

        acceptance = message if is_accept_msg(message) else None
        if acceptance is None and message.type == MessageType.OFFER:
            history = await self._message_repo.list_for_conversation(conversation.id)
            acceptance = next(
                (m for m in reversed(history) if is_accept_msg(m) and m.responded_offer_id == message.id),
                None,
            )
        if acceptance is None:
            raise ValidationError("negotiated_from_offer_id", "l'offre n'a pas été acceptée")

        window = reservation_window(acceptance, self._clock.now(), window_hours=self._offer_window_hours)
        if not window.can_reserve:
            raise ReservationWindowClosedError(acceptance.id)
        return _accepted_price(acceptance)

    def _guest_info(self, quote: PriceQuote, payment_method: PaymentMethod) -> dict[str, Any]:
        return {
            "nights": quote.units,
            "add_ons": [line.to_dict() for line in quote.add_on_lines],
            "add_ons_total": str(quote.add_ons_total.amount),
            "service_fee_per_night": str(quote.service_fee_per_unit.amount),
            "service_fee_total": str(quote.service_fee_total.amount),
            "payment_choice": payment_method.value,
            "totals": {
                "base": str(quote.base_total.amount),
                "grand_total": str(quote.grand_total.amount),
                "amount_due_now": str(quote.amount_due_now.amount),
                "amount_due_in_person": str(quote.amount_due_in_person.amount),
            },
        }


def _accepted_price(acceptance: Message) -> Decimal:
    if acceptance.price is None or acceptance.price <= 0:
        raise ValidationError("negotiated_from_offer_id", "offre acceptée sans prix")
    return Decimal(acceptance.price)
