from contextlib import asynccontextmanager

from marketplace.application.interfaces.transaction_manager import TransactionManager


class NoopTransactionManager(TransactionManager):
    @asynccontextmanager
    async def start(self):
        yield
