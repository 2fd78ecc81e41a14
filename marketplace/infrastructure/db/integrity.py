"""
Traducción de errores de integridad del driver a errores de dominio.

Los drivers reportan las violaciones de forma distinta (SQLSTATE en
PostgreSQL, texto en SQLite); se reconocen por código o por mensaje.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domain.errors import CheckViolationError, DomainError, UniqueViolationError

logger = logging.getLogger(__name__)

# SQLSTATE
PG_UNIQUE_VIOLATION = "23505"
PG_CHECK_VIOLATION = "23514"

UNIQUE_MARKERS = (PG_UNIQUE_VIOLATION, "UNIQUE constraint failed", "Duplicate entry", "duplicate key")
CHECK_MARKERS = (PG_CHECK_VIOLATION, "CHECK constraint failed", "violates check constraint")


def _sqlstate(error: DBAPIError) -> str | None:
    orig = getattr(error, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(error: Exception) -> bool:
    if not isinstance(error, DBAPIError):
        return False
    if _sqlstate(error) == PG_UNIQUE_VIOLATION:
        return True
    error_str = str(error)
    return any(marker in error_str for marker in UNIQUE_MARKERS)


def is_check_violation(error: Exception) -> bool:
    if not isinstance(error, DBAPIError):
        return False
    if _sqlstate(error) == PG_CHECK_VIOLATION:
        return True
    error_str = str(error)
    return any(marker in error_str for marker in CHECK_MARKERS)


def translate_integrity_error(error: DBAPIError, table: str) -> DomainError | None:
    detail = str(getattr(error, "orig", error))
    if is_unique_violation(error):
        return UniqueViolationError(table, detail)
    if is_check_violation(error):
        return CheckViolationError(table, detail)
    return None


@asynccontextmanager
async def guarded_write(session: AsyncSession, table: str) -> AsyncIterator[None]:
    """
    Ejecuta una escritura en un SAVEPOINT.

    Una violación de restricción revierte solo el savepoint y se relanza como
    UniqueViolationError / CheckViolationError; la transacción externa sigue
    utilizable para reintentos o lecturas.
    """
    try:
        async with session.begin_nested():
            yield
    except IntegrityError as exc:
        translated = translate_integrity_error(exc, table)
        if translated is None:
            raise
        logger.info(
            "Constraint violation translated",
            extra={"table": table, "code": translated.code},
        )
        raise translated from exc
