"""Ajustes del driver SQLite para que los SAVEPOINT funcionen."""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Desactiva el manejo implícito de transacciones de pysqlite/aiosqlite y
    emite BEGIN explícito, de modo que ``begin_nested`` use SAVEPOINT reales.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")
