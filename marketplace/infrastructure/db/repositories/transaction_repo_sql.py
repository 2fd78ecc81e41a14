from typing import Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.domain.entities.transaction import PaymentMethod, Transaction, TransactionStatus
from marketplace.infrastructure.db.converters import as_utc
from marketplace.infrastructure.db.integrity import guarded_write
from marketplace.infrastructure.db.tables import transactions


def _to_entity(row) -> Transaction:
    return Transaction(
        id=row["id"],
        reservation_id=row["reservation_id"],
        user_id=row["user_id"],
        amount=row["amount"],
        commission=row["commission"],
        status=TransactionStatus(row["status"]),
        payment_method=PaymentMethod(row["payment_method"]),
        created_at=as_utc(row["created_at"]),
    )


class TransactionRepoSQL(TransactionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, transaction: Transaction) -> None:
        async with guarded_write(self._session, "transactions"):
            await self._session.execute(
                insert(transactions).values(
                    id=transaction.id,
                    reservation_id=transaction.reservation_id,
                    user_id=transaction.user_id,
                    amount=transaction.amount,
                    commission=transaction.commission,
                    status=transaction.status.value,
                    payment_method=transaction.payment_method.value,
                    created_at=transaction.created_at,
                )
            )

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Transaction]:
        stmt = (
            select(transactions)
            .where(transactions.c.reservation_id == reservation_id)
            .order_by(transactions.c.created_at)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings()]

    async def list_by_reservations(self, reservation_ids: Sequence[str]) -> dict[str, list[Transaction]]:
        if not reservation_ids:
            return {}
        stmt = select(transactions).where(transactions.c.reservation_id.in_(list(reservation_ids)))
        result = await self._session.execute(stmt)
        grouped: dict[str, list[Transaction]] = {}
        for row in result.mappings():
            grouped.setdefault(row["reservation_id"], []).append(_to_entity(row))
        return grouped
