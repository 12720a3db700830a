"""
RideWitUS - FastAPI Application

Main entry point for the backend API.
Provides endpoints for authentication, account administration, activities,
pricing, cloud sync and subscriptions.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ridewitus import __version__
from ridewitus.api.middleware import SessionCookieMiddleware
from ridewitus.config.settings import settings
from ridewitus.infrastructure.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    RideWitUsError,
    UpstreamError,
    ValidationError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(f"RideWitUS backend starting in {settings.environment} mode...")

    missing = settings.missing_required
    if missing:
        if settings.is_production:
            logger.critical(f"Refusing to start without: {', '.join(missing)}")
            raise ConfigurationError(
                "Required configuration is missing",
                missing_keys=missing,
            )
        logger.warning(f"Running without {', '.join(missing)}; authenticated requests will fail")

    if settings.database_url:
        from ridewitus.domain.pricing import PricingCatalog
        from ridewitus.infrastructure.db.database import (
            get_db_manager,
            get_session_context,
            init_db,
        )
        from ridewitus.infrastructure.db.repositories import PricingTierRepository

        await init_db()
        logger.info("Database connection verified")

        if settings.is_development:
            await get_db_manager().create_tables()
            logger.info("Development schema created from models")

        async with get_session_context() as session:
            await PricingCatalog(PricingTierRepository(session)).seed_defaults()

    yield

    if settings.database_url:
        from ridewitus.infrastructure.db.database import close_db
        await close_db()
        logger.info("Database connection pool closed")

    logger.info("RideWitUS backend shutting down...")


app = FastAPI(
    title="RideWitUS",
    description="Activity tracking for walking, running, biking and driving",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(SessionCookieMiddleware)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

def _error_response(exc: RideWitUsError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=settings.debug),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return _error_response(exc)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return _error_response(exc)


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    logger.warning(f"Forbidden {request.method} {request.url.path}: {exc.error_code}")
    return _error_response(exc)


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return _error_response(exc)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return _error_response(exc)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error(f"Upstream failure on {request.url.path}: {exc.message}")
    return _error_response(exc)


@app.exception_handler(RideWitUsError)
async def general_error_handler(request: Request, exc: RideWitUsError):
    """Handle all other application errors."""
    logger.error(f"Unhandled application error on {request.url.path}: {exc.message}")
    return _error_response(exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Render any other exception as a structured UNKNOWN_ERROR."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return _error_response(RideWitUsError("Internal server error", original_error=exc))


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "ridewitus"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "RideWitUS API",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from ridewitus.api.routes import (  # noqa: E402
    activities,
    admin,
    auth,
    pricing,
    subscriptions,
    sync,
)

app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(admin.router, prefix="/api", tags=["Admin"])
app.include_router(pricing.router, prefix="/api", tags=["Pricing"])
app.include_router(activities.router, prefix="/api", tags=["Activities"])
app.include_router(sync.router, prefix="/api", tags=["Sync"])
app.include_router(subscriptions.router, prefix="/api", tags=["Subscriptions"])
