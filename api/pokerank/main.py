import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pokerank.config import settings
from pokerank.database import (
    create_engine,
    create_schema,
    memory_storage_provider,
    sql_storage_provider,
)
from pokerank.errors import (
    EntityNotFoundError,
    InsufficientDataError,
    InvalidArgumentError,
    PokeRankError,
)
from pokerank.logging_config import configure_logging
from pokerank.metrics import metrics_endpoint
from pokerank.middleware.logging_middleware import RequestLoggingMiddleware
from pokerank.routers import matchups, rankings, roster, stats, votes
from pokerank.schemas.common import ErrorResponse

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure structured logging before anything else
    configure_logging()

    # Startup: choose the storage adapter and store its provider on app.state
    engine = None
    if settings.database_url:
        engine = create_engine(settings)
        if settings.database_url.startswith("sqlite"):
            # Local runs skip Alembic
            await create_schema(engine)
        app.state.storage_provider = sql_storage_provider(engine)
    else:
        app.state.storage_provider = memory_storage_provider()
    log.info("storage_configured", adapter="sql" if engine else "memory")
    # Serializes first-request seeding and resets on this app's loop
    app.state.seed_lock = asyncio.Lock()

    try:
        yield
    finally:
        # Shutdown: release pooled connections
        if engine is not None:
            await engine.dispose()


app = FastAPI(title=f"{settings.app_name} API", version="0.1.0", lifespan=lifespan)

# Register request logging middleware (runs on every request)
app.add_middleware(RequestLoggingMiddleware)

# Register all API routers
app.include_router(roster.router)
app.include_router(matchups.router)
app.include_router(votes.router)
app.include_router(rankings.router)
app.include_router(stats.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


# Domain error -> HTTP status. Anything unlisted is a server error.
ERROR_STATUS_CODES: dict[type[PokeRankError], int] = {
    EntityNotFoundError: 404,
    InvalidArgumentError: 400,
    InsufficientDataError: 503,
}


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message).model_dump(by_alias=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(PokeRankError)
async def handle_domain_error(request: Request, exc: PokeRankError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    headers = {"Retry-After": "5"} if isinstance(exc, InsufficientDataError) else None
    log.warning("request_rejected", error=type(exc).__name__, detail=str(exc), status_code=status_code)
    return _error_response(status_code, str(exc), headers)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed input is a 400 here, not FastAPI's default 422
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _error_response(400, f"Invalid request: {errors}")


@app.get("/health")
async def health_check():
    return {"status": "ok"}
