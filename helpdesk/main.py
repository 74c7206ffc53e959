"""
Helpdesk Ticketing - Main Application
======================================

Internal helpdesk API: requesters open tickets, agents work them, and an
SLA watchdog reports every ticket past its due-by instant.

Modules:
- Identity: Registration, login, bearer-token authentication
- Tickets: Ticket lifecycle, comments, role-based visibility
- SLA Watchdog: Periodic overdue sweep with batch notification

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, value objects and access policy
- Infrastructure: Database, webhook client, scheduler
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configuration and Core
from helpdesk.config import settings
from helpdesk.core import ApplicationException

# Infrastructure
from helpdesk.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)
from helpdesk.shared.infrastructure.notifications import (
    NotificationDispatcher,
    TeamsWebhookClient,
)

# SLA Module
from helpdesk.sla.application import SLAWatchdog
from helpdesk.sla.infrastructure import SLAScheduler
from helpdesk.tickets.infrastructure import SQLAlchemyTicketRepository

# Module Routers
from helpdesk.identity.interfaces import identity_router
from helpdesk.tickets.interfaces import tickets_router

# Shared API plumbing
from helpdesk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    application_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)

# Logging
from helpdesk.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Start the notification dispatcher
    4. Start the SLA watchdog scheduler (when enabled)

    SHUTDOWN:
    1. Stop SLA scheduler
    2. Flush and stop the notification dispatcher
    3. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpdesk Service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()
    await create_tables()

    dispatcher = NotificationDispatcher(TeamsWebhookClient())
    await dispatcher.start()
    app.state.notifier = dispatcher

    scheduler = None
    if settings.sla_watchdog_enabled:
        watchdog = SLAWatchdog(get_session_context, SQLAlchemyTicketRepository, dispatcher)
        scheduler = SLAScheduler(interval_seconds=settings.sla_watchdog_interval_seconds)
        await scheduler.start(watchdog.run)
    else:
        logger.info("SLA watchdog disabled")
    app.state.sla_scheduler = scheduler

    logger.info("Helpdesk Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Helpdesk Service")

    if scheduler:
        await scheduler.stop()

    await dispatcher.stop()
    await close_database()

    logger.info("Helpdesk Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Helpdesk Ticketing API",
    description="""
    ## Internal Helpdesk

    ### 🔐 Identity
    - `POST /api/register` - Create a requester account
    - `POST /api/login` - Exchange credentials for a bearer token
    - `GET /api/me` - Current user

    ### 🎫 Tickets
    - `POST /api/tickets` - Open a ticket (SLA due-by fixed at creation)
    - `GET /api/tickets` - Newest 100 visible tickets
    - `GET /api/tickets/{id}` - One ticket
    - `PATCH /api/tickets/{id}` - Status / assignee (agent, admin)
    - `GET|POST /api/tickets/{id}/comments` - Comment thread

    ### ⏱️ SLA Windows

    | Priority | Window |
    |----------|--------|
    | P1       | 30 min |
    | P2       | 60 min |
    | P3       | 8 h    |

    Every 5 minutes open and in-progress tickets past their due-by instant
    are reported to the support channel in one message.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(identity_router)
app.include_router(tickets_router)

# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "sla_scheduler": "running",
                        "notifier": "running (0 pending)",
                        "teams_webhook": "configured"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Reports scheduler and notification dispatcher state.
    """
    scheduler = getattr(request.app.state, "sla_scheduler", None)
    notifier = getattr(request.app.state, "notifier", None)

    if scheduler is None:
        scheduler_state = "disabled"
    else:
        scheduler_state = "running" if scheduler.is_running else "stopped"

    if notifier is None:
        notifier_state = "stopped"
    else:
        notifier_state = f"{'running' if notifier.is_running else 'stopped'} ({notifier.pending} pending)"

    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {
            "sla_scheduler": scheduler_state,
            "notifier": notifier_state,
            "teams_webhook": "configured" if settings.teams_webhook_url else "not_configured"
        }
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "identity": {
                "prefix": "/api",
                "endpoints": [
                    "POST /api/register - Create account",
                    "POST /api/login - Get bearer token",
                    "GET /api/me - Current user"
                ]
            },
            "tickets": {
                "prefix": "/api/tickets",
                "endpoints": [
                    "POST /api/tickets - Open ticket",
                    "GET /api/tickets - List visible tickets",
                    "GET /api/tickets/{id} - Get ticket",
                    "PATCH /api/tickets/{id} - Update status/assignee",
                    "GET /api/tickets/{id}/comments - List comments",
                    "POST /api/tickets/{id}/comments - Add comment"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "helpdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
