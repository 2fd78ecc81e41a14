"""
Endpoints de salud para orquestadores (K8s, Docker, etc.)

- /health: liveness básico (siempre 200)
- /health/db: conectividad con la base de datos
- /health/ready: readiness (dependencias sanas)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "marketplace-api"


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        return True
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return False


@router.get("/health")
async def health_check():
    """Liveness: 200 mientras el proceso esté vivo."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    """503 si la base de datos no responde."""
    if await _database_reachable(session):
        return {"status": "healthy", "component": "database"}
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "component": "database", "error": "Database connection failed"},
    )


@router.get("/health/ready")
async def health_check_ready(session: AsyncSession = Depends(get_db_session)):
    """
    Readiness: controla si el pod recibe tráfico.

    Retorna 503 mientras la base de datos no esté disponible.
    """
    if await _database_reachable(session):
        return {"status": "ready", "checks": {"database": "healthy"}}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "checks": {"database": "unhealthy"}},
    )


@router.get("/health/live")
async def health_check_live():
    """Alias de /health para orquestadores que usan /health/live."""
    return {"status": "ok", "service": SERVICE_NAME}
