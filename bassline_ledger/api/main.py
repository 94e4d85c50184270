"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bassline_ledger.api.dependencies import get_request_id
from bassline_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bassline_ledger.api.v1 import loans, reports, transactions, users
from bassline_ledger.domain.exceptions import (
    DomainException,
    DuplicateEmailError,
    LoanAlreadyCompletedError,
    NotFoundError,
)
from bassline_ledger.infrastructure.database.session import init_db
from bassline_ledger.infrastructure.observability.logging import setup_logging
from bassline_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (DuplicateEmailError, LoanAlreadyCompletedError)):
        return 409
    return 422


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Bassline Ledger",
        description="Transactions, installment loans and account reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(DomainException)
    async def domain_error_handler(request: Request, exc: DomainException):
        status_code = _status_for(exc)
        logging.warning(
            f"{type(exc).__name__}: {exc}",
            extra={"request_id": get_request_id(request), "status": status_code},
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(users.router, prefix="/v1", tags=["users"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
