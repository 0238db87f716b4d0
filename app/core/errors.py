from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AccountError
from app.core.logging import get_logger
from app.schemas.response import Info, ResponseType
from app.core.config import settings

logger = get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    """
    Builds an ERROR envelope reply.
    """
    return JSONResponse(
        status_code=status_code,
        content=Info(code=status_code, message=message, type=ResponseType.ERROR).as_dict()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(AccountError)
    async def account_exception_handler(request: Request, exc: AccountError):
        logger.info(
            f"{request.method} {request.url.path} rejected: {exc.message}",
            extra={"status_code": exc.status_code}
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors on typed parameters.
        """
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        return error_response(422, "Input validation failed: " + ", ".join(fields))

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

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return error_response(500, message)
