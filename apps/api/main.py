"""
Trading Strategy Dashboard - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.database import Database
from core.errors import DomainError
from core.logging import configure_logging
from core.responses import err
from routers import dashboard, drawdown, operations, portfolio, rotations, system_config

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.LOG_LEVEL)

    database = Database(settings.DATABASE_URL, echo=settings.APP_ENV == "development")
    await database.init_schema()
    app.state.database = database
    logger.info("api.startup", env=settings.APP_ENV, log_level=settings.LOG_LEVEL)
    try:
        yield
    finally:
        await database.dispose()
        logger.info("api.shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Trading Strategy Dashboard API",
        description="API del dashboard personal de estrategia: portfolio, operaciones, rotaciones y drawdown.",
        version="1.0.0",
        docs_url="/docs" if settings.APP_ENV != "production" else None,
        redoc_url="/redoc" if settings.APP_ENV != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # -----------------------------------------------------------------------
    # Middlewares
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Content-Type"],
    )

    # -----------------------------------------------------------------------
    # Exception handlers globales - mantienen formato { data, error, meta }
    # -----------------------------------------------------------------------

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        headers = getattr(exc, "headers", None)
        return JSONResponse(
            status_code=exc.status_code,
            content=err(exc.detail),
            headers=headers,
        )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=err(exc.message, meta=exc.meta),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Datos ausentes o mal tipados: 400, igual que el resto de errores de validación
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=err("Faltan datos requeridos o son inválidos", meta={"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", path=str(request.url), error=str(exc), exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=err("Error interno del servidor"),
        )

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
    app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])
    app.include_router(operations.router, prefix="/api/operations", tags=["operations"])
    app.include_router(rotations.router, prefix="/api/rotations", tags=["rotations"])
    app.include_router(drawdown.router, prefix="/api/drawdown", tags=["drawdown"])
    app.include_router(system_config.router, prefix="/api/system-config", tags=["system-config"])

    # -----------------------------------------------------------------------
    # Health check
    # -----------------------------------------------------------------------

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        return {"status": "ok", "env": settings.APP_ENV}

    return app


app = create_app()
