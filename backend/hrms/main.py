"""
HRMS Backend - FastAPI application

Builds the app: middleware, error envelopes, the /api/v1 routers, the
in-process event router and the optional seller sync job.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.middleware import CorrelationIdMiddleware, RateLimitMiddleware, register_error_handlers
from .api.middleware.correlation import HEADER as CORRELATION_HEADER
from .api.routes import api_router
from .config.settings import settings
from .events import EventRouter, register_default_handlers
from .repositories.mongo_client import close_connection, create_indexes, health_check
from .scheduler.seller_sync_scheduler import SellerSyncScheduler
from .utils.logger import get_logger, setup_logging

VERSION = "1.0.0"
API_PREFIX = "/api/v1"

setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Lifecycle
# =============================================================================

def _start_seller_sync(app: FastAPI) -> None:
    try:
        scheduler = SellerSyncScheduler()
        scheduler.start()
    except Exception as e:
        # The API still serves without the periodic sync
        logger.error(f"Seller sync scheduler not started: {e}", exc_info=True)
        return
    app.state.seller_sync_scheduler = scheduler


async def _shutdown(app: FastAPI) -> None:
    scheduler = app.state.seller_sync_scheduler
    if scheduler is not None:
        scheduler.stop()
        app.state.seller_sync_scheduler = None

    pending = app.state.event_router.pending
    if pending:
        logger.info(f"Delivering {pending} queued events before exit")
    await app.state.event_router.drain()

    close_connection()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: ensure MongoDB indexes, start the seller sync job if enabled.
    Shutdown: stop the job, flush queued events, close MongoDB.
    """
    logger.info(f"HRMS backend {VERSION} starting (env={settings.environment})")
    try:
        create_indexes()
    except Exception as e:
        logger.error(f"Index creation failed, continuing without: {e}")

    if settings.seller_sync_enabled:
        _start_seller_sync(app)

    yield

    logger.info("HRMS backend stopping")
    await _shutdown(app)
    logger.info("HRMS backend stopped")


# =============================================================================
# Factory
# =============================================================================

def create_app() -> FastAPI:
    """Build a fully wired application; each call gets its own event router"""
    docs_enabled = settings.debug
    application = FastAPI(
        title="HRMS Backend",
        description="Roles, org hierarchy, salary breakups and event-driven notifications",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
    )

    # Notification handlers create their repositories on first delivery
    application.state.event_router = register_default_handlers(EventRouter())
    application.state.seller_sync_scheduler = None

    _add_middleware(application)
    register_error_handlers(application)
    application.include_router(api_router, prefix=API_PREFIX)
    _add_service_routes(application)

    return application


def _add_middleware(app: FastAPI) -> None:
    # Wildcard origins cannot be combined with credentials
    wildcard = settings.cors_origins.strip() == "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.cors_origins_list,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            CORRELATION_HEADER, "RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset"
        ],
    )
    app.add_middleware(RateLimitMiddleware)
    # Outermost, so throttled responses are tagged too
    app.add_middleware(CorrelationIdMiddleware)


def _seller_sync_status(app: FastAPI) -> Dict[str, Any]:
    scheduler = app.state.seller_sync_scheduler
    if scheduler is None:
        return {"enabled": settings.seller_sync_enabled, "running": False, "last_summary": None}
    return {
        "enabled": settings.seller_sync_enabled,
        "running": scheduler.is_running,
        "last_summary": scheduler.last_summary,
    }


def _add_service_routes(app: FastAPI) -> None:
    @app.get("/health", tags=["Health"])
    async def health():
        """MongoDB reachability, queued events and seller sync state"""
        mongo = health_check()
        return {
            "status": "healthy" if mongo["status"] == "healthy" else "degraded",
            "version": VERSION,
            "environment": settings.environment,
            "mongo": mongo,
            "pending_events": app.state.event_router.pending,
            "seller_sync": _seller_sync_status(app),
        }

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "name": "HRMS Backend",
            "version": VERSION,
            "api": API_PREFIX,
            "docs": "/api/docs" if settings.debug else None,
        }


app = create_app()
