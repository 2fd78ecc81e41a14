from typing import Sequence

from marketplace.domain.entities.transaction import Transaction


class TransactionRepo:
    async def create(self, transaction: Transaction) -> None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Transaction]:
        raise NotImplementedError

    async def list_by_reservations(self, reservation_ids: Sequence[str]) -> dict[str, list[Transaction]]:
        raise NotImplementedError
