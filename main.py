import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.storage import RegistryStorage
from src.infrastructure.config.settings import get_settings
from src.infrastructure.persistence.database import (create_engine,
                                                     create_schema,
                                                     create_session_factory)
from src.presentation.api.errors import register_exception_handlers
from src.presentation.api.v1.routes import (campaign, hunters, hunting_guides,
                                            maintenance, permits, reports,
                                            users)
from src.presentation.middleware import (CorrelationIDMiddleware,
                                         TimeoutMiddleware)
from src.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    setup_logging()

    engine = create_engine(settings)
    # Schema is normally managed by migrations; auto-create is for local runs
    if settings.database_auto_create:
        await create_schema(engine)
        logger.info("Database schema created")

    app.state.engine = engine
    app.state.storage = RegistryStorage(create_session_factory(engine))
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Middleware (order matters - applied in reverse)
app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)
app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(hunters.router, prefix="/hunters", tags=["hunters"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(hunting_guides.router, prefix="/hunting-guides", tags=["hunting-guides"])
app.include_router(permits.router, prefix="/permits", tags=["permits"])
app.include_router(permits.taxes_router, prefix="/taxes", tags=["taxes"])
app.include_router(
    reports.permit_requests_router, prefix="/permit-requests", tags=["permit-requests"]
)
app.include_router(
    reports.hunting_reports_router, prefix="/hunting-reports", tags=["hunting-reports"]
)
app.include_router(campaign.router, prefix="/campaign", tags=["campaign"])
app.include_router(maintenance.router, prefix="/maintenance", tags=["maintenance"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
    - 200 OK if the database answers
    - 503 Service Unavailable otherwise
    """
    checks = {"api": True, "database": False}
    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
    return {"status": "healthy", "checks": checks}
