"""Entidad Transaction - pago declarado de una reservación."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TransactionStatus(str, Enum):
    """Estados de una transacción. Las transiciones ocurren fuera de la app."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Elección de pago en el checkout."""

    SERVICE_FEE_ONLY = "service_fee_only"
    ALL_ONLINE = "all_online"


@dataclass
class Transaction:
    """
    Transacción asociada a una reservación.

    No hay captura de pago en la app: solo se declara el monto y el estado.
    """

    id: str
    reservation_id: str
    user_id: str
    amount: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    status: TransactionStatus = TransactionStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.SERVICE_FEE_ONLY
    created_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == TransactionStatus.PAID
