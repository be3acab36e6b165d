"""Shift Manager — FastAPI Application Factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shift_manager import __version__
from shift_manager.ares.router import router as ares_router
from shift_manager.auth.router import router as auth_router
from shift_manager.common.exceptions import register_exception_handlers
from shift_manager.common.log import configure_logging
from shift_manager.common.middleware import register_middleware
from shift_manager.common.rate_limit import limiter
from shift_manager.config import settings
from shift_manager.customers.router import router as customers_router
from shift_manager.database import engine
from shift_manager.documents.router import router as documents_router
from shift_manager.exchange_requests.router import router as exchange_requests_router
from shift_manager.invoices.router import router as invoices_router
from shift_manager.reports.router import router as reports_router
from shift_manager.shifts.router import router as shifts_router
from shift_manager.stats.router import router as stats_router
from shift_manager.workers.router import router as workers_router
from shift_manager.workflow.router import router as workflow_router
from shift_manager.workplaces.router import router as workplaces_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    yield
    # Shutdown
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Shift Manager",
        description="Shift scheduling, invoicing and workflow management API",
        version=__version__,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request log + security headers
    register_middleware(app)

    # Health check (no auth)
    @app.get("/api/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api", tags=["auth"])
    app.include_router(workplaces_router, prefix="/api/workplaces", tags=["workplaces"])
    app.include_router(shifts_router, prefix="/api/shifts", tags=["shifts"])
    app.include_router(
        exchange_requests_router, prefix="/api/exchange-requests", tags=["exchange-requests"],
    )
    app.include_router(customers_router, prefix="/api/customers", tags=["customers"])
    app.include_router(invoices_router, prefix="/api/invoices", tags=["invoices"])
    app.include_router(documents_router, prefix="/api/documents", tags=["documents"])
    app.include_router(workers_router, prefix="/api/workers", tags=["workers"])
    app.include_router(reports_router, prefix="/api/reports", tags=["reports"])
    app.include_router(stats_router, prefix="/api/stats", tags=["stats"])
    app.include_router(ares_router, prefix="/api/ares", tags=["ares"])
    app.include_router(workflow_router, prefix="/api/workflow")

    return app


app = create_app()
