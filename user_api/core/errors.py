from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.core.config import Settings
from user_api.core.exceptions import UserApiError
from user_api.core.logging import get_logger
from user_api.schemas.response import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, **fields) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(**fields).model_dump(exclude_none=True)
    )


def add_exception_handlers(app: FastAPI, settings: Settings):
    """
    Registers exception handlers with the FastAPI app.
    Every failure leaves as `{success: false, message, error, code}`.
    """
    @app.exception_handler(UserApiError)
    async def user_api_exception_handler(request: Request, exc: UserApiError):
        return error_response(
            exc.status_code,
            message=exc.message,
            error=exc.error,
            code=exc.code,
            details=exc.details
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions.
        Unknown paths and unsupported methods both read as an unmatched route.
        """
        if exc.status_code in (404, 405):
            return error_response(
                404,
                message="Route not found",
                error=f"Cannot {request.method} {request.url.path}",
                code="ROUTE_NOT_FOUND"
            )
        return error_response(
            exc.status_code,
            message=str(exc.detail),
            error=str(exc.detail),
            code="HTTP_ERROR"
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles FastAPI request parsing errors (path/query parameters).
        """
        return error_response(
            400,
            message="Validation Error",
            error="Request validation failed",
            code="VALIDATION_ERROR",
            details=jsonable_encoder(exc.errors())
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        error = "An internal error occurred. Please try again later." if settings.is_production else str(exc)

        return error_response(
            500,
            message="Internal server error",
            error=error,
            code="INTERNAL_ERROR"
        )
