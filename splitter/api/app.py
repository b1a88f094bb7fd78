"""
FastAPI Application for Splitter

Builds the HTTP app around the ledger flows. Every failure is caught
at this boundary and returned as a JSON {"error": ...} payload:

- bad input (schema or semantic validation) → 400 with the reason
- storage or ledger-data failures → 500 with a generic message
"""

import time
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from splitter import __version__
from splitter.audit import configure_logging
from splitter.config import get_settings
from splitter.ledger import LedgerError
from splitter.orchestrator import ChatFlow, LedgerFlow, create_app_components
from splitter.services.storage import StorageError
from splitter.validation import ExpenseValidationError
from splitter.api.routes import health_router, router


logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """First schema error as "field: reason"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to JSON error responses."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(ExpenseValidationError)
    async def expense_validation_handler(request: Request, exc: ExpenseValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Could not reach the expense storage. Please try again later.",
        )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        logger.error("ledger_error", path=request.url.path, error=str(exc))
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "The ledger contains an entry that cannot be processed.",
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    ledger_flow: Optional[LedgerFlow] = None,
    chat_flow: Optional[ChatFlow] = None,
    storage_backend: Optional[str] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Pass flows explicitly to run the API against a specific storage
    (tests do this with in-memory storage); otherwise they are built
    from settings.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    if ledger_flow is None or chat_flow is None:
        ledger_flow, chat_flow, storage_backend = create_app_components()

    app = FastAPI(
        title="Splitter API",
        description="Shared-expense ledger with a pattern-matching chat",
        version=__version__,
        debug=settings.app.debug_mode,
    )
    app.state.ledger_flow = ledger_flow
    app.state.chat_flow = chat_flow
    app.state.storage_backend = storage_backend or "custom"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(router)

    return app


def run_server() -> None:
    """Console entry point: serve the API with uvicorn."""
    api_settings = get_settings().api
    uvicorn.run(
        create_app(),
        host=api_settings.host,
        port=api_settings.port,
    )


if __name__ == "__main__":
    run_server()
