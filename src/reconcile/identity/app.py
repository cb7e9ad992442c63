from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reconcile.shared.logging import get_logger, setup_logging

from .config import get_settings
from .errors import IdentityRequestError, RetryExhaustedError
from .routes import health, identify

logger = get_logger("identity.app")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Identity Reconciliation Service", version="0.1.0")

    @app.get("/v1/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok", "service": settings.service_name}

    @app.exception_handler(IdentityRequestError)
    async def handle_request_error(request: Request, exc: IdentityRequestError) -> JSONResponse:
        logger.warning("identify_rejected", error=exc.message, status_code=exc.status_code)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [str(item.get("msg", "")) for item in exc.errors()]
        logger.warning("identify_rejected", error=messages)
        return _error(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request body")

    @app.exception_handler(RetryExhaustedError)
    async def handle_retry_exhausted(request: Request, exc: RetryExhaustedError) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    app.include_router(health.router)
    app.include_router(identify.router)

    return app


__all__ = ["create_app"]
