from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.features.audit.exceptions import (
    AuditError,
    ConfigurationError,
    MissingParameter,
    UpstreamError,
)
from app.platform.logger import get_logger
from app.platform.response import api_response

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI):
    @app.exception_handler(AuditError)
    async def audit_exception_handler(request: Request, exc: AuditError):
        if isinstance(exc, MissingParameter):
            logger.warning(f"Rejected audit request {request.url.path}: {exc.message}")
        elif isinstance(exc, ConfigurationError):
            logger.error(f"Audit endpoint misconfigured: {exc.message}")
        elif isinstance(exc, UpstreamError):
            logger.error(f"Upstream measurement failed for {exc.url}: {exc.message}")

        # Audit errors keep their own flat shape; the frontend reads `error` at top level
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(
            message=str(exc.detail) or "Error",
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation failed for {request.url.path}: {exc.errors()}")
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
