"""
Riding Club Booking API - Main Application Entry Point

Members request arena time, singly or as weekly subscriptions; the club
office approves, rejects and decides shared riding; everyone reads the
club notices.
- Remote database with an in-process fallback store behind one gateway
- Group-aware approval and deletion with best-effort fan-out
- Structured logging with request correlation
- Redis caching of calendar listings
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from riding_club.core.config import get_settings
from riding_club.core.errors import register_error_handlers
from riding_club.core.logging import setup_logging, get_logger
from riding_club.core.metrics import metrics_endpoint
from riding_club.api.router import api_router
from riding_club.api.middleware import RequestLoggingMiddleware
from riding_club.db.session import build_engine, build_sessionmaker
from riding_club.gateway import LocalStore, SqlStore, TieredGateway
from riding_club.services.cache_service import get_redis, close_redis, get_cache_stats
from riding_club.services.group_coordinator import GroupLifecycleCoordinator
from riding_club.services.projection import BookingProjection

settings = get_settings()


async def start_services(
    app: FastAPI, database_url: Optional[str] = None, create_tables: bool = False
) -> None:
    """
    Wire the gateway, projection and coordinator onto ``app.state``.
    ``create_tables`` runs ``create_all``, which tests and local SQLite
    setups use instead of Alembic.
    """
    logger = get_logger(__name__)

    engine = build_engine(database_url)
    if create_tables:
        from riding_club.db.base import Base
        import riding_club.models  # noqa: F401 - register tables

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    gateway = TieredGateway(
        remote=SqlStore(build_sessionmaker(engine)),
        local=LocalStore(seed_messages=settings.SEED_LOCAL_MESSAGES),
    )
    projection = BookingProjection()
    app.state.engine = engine
    app.state.gateway = gateway
    app.state.projection = projection
    app.state.coordinator = GroupLifecycleCoordinator(gateway, projection)

    if await gateway.ping():
        logger.info("remote_store_ready")
    else:
        logger.warning("remote_store_unavailable", message="Serving from the local store")
        gateway.demote()
    await projection.refresh(gateway)


async def stop_services(app: FastAPI) -> None:
    await app.state.engine.dispose()


def create_app(database_url: Optional[str] = None, create_tables: bool = False) -> FastAPI:
    """Build and configure the application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger = get_logger(__name__)

        logger.info(
            "application_starting",
            app=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

        await start_services(app, database_url, create_tables)

        redis_client = await get_redis()
        if redis_client:
            logger.info("redis_ready")
        else:
            logger.warning("redis_unavailable", message="Running without cache")

        yield

        await close_redis()
        await stop_services(app)
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Arena booking for a riding club: subscriptions, approvals and club notices",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for Docker and load balancers."""
        gateway = app.state.gateway
        return {
            "status": "healthy" if gateway.tier == "remote" else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "storage_tier": gateway.tier,
            "projection_size": len(app.state.projection),
            "cache": await get_cache_stats(),
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    async def metrics():
        return metrics_endpoint()

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
