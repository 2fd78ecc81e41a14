import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.api.deps import engine
from marketplace.api.errors import status_for
from marketplace.api.routers.bookings import router as bookings_router
from marketplace.api.routers.conversations import router as conversations_router
from marketplace.api.routers.earnings import router as earnings_router
from marketplace.api.routers.health import router as health_router
from marketplace.api.routers.listings import router as listings_router
from marketplace.api.routers.reservations import router as reservations_router
from marketplace.config import get_settings
from marketplace.domain.errors import DomainError
from marketplace.infrastructure.db.tables import metadata

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Crea las tablas (dev / demo)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield
    await engine.dispose()

app = FastAPI(
    title="Marketplace API",
    version="0.1.0",
    lifespan=lifespan
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "Domain error surfaced as server error",
            extra={"code": exc.code, "path": request.url.path, "method": request.method},
        )
    else:
        logger.info(
            "Request rejected",
            extra={"code": exc.code, "status": status_code, "path": request.url.path},
        )
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Oculta el stack trace al cliente: se registra internamente y se
    responde un mensaje genérico con un error_id para soporte.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(listings_router, prefix="/api/v1", tags=["Listings"])
app.include_router(conversations_router, prefix="/api/v1", tags=["Conversations"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(reservations_router, prefix="/api/v1", tags=["Reservations"])
app.include_router(earnings_router, prefix="/api/v1", tags=["Earnings"])
