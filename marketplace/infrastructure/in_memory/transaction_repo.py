"""Implementación in-memory del repositorio de transacciones."""

from copy import deepcopy
from typing import Sequence

from marketplace.application.interfaces.transaction_repo import TransactionRepo
from marketplace.domain.entities.transaction import Transaction


class InMemoryTransactionRepo(TransactionRepo):
    def __init__(self) -> None:
        self._transactions: dict[str, Transaction] = {}

    async def create(self, transaction: Transaction) -> None:
        self._transactions[transaction.id] = deepcopy(transaction)

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Transaction]:
        return [deepcopy(t) for t in self._transactions.values() if t.reservation_id == reservation_id]

    async def list_by_reservations(self, reservation_ids: Sequence[str]) -> dict[str, list[Transaction]]:
        wanted = set(reservation_ids)
        grouped: dict[str, list[Transaction]] = {}
        for transaction in self._transactions.values():
            if transaction.reservation_id in wanted:
                grouped.setdefault(transaction.reservation_id, []).append(deepcopy(transaction))
        return grouped

    def clear(self) -> None:
        self._transactions.clear()
