import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class ValidationFailed(AppException):
    """Per-field rule violations, rendered as a ``{field: message}`` body."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("Validation failed", status_code=400)
        self.errors = errors


class NotFoundError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class InvalidCredentials(AppException):
    def __init__(self, message: str = "Invalid login or password"):
        super().__init__(message, status_code=401)


class AuthenticationRequired(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class AuthenticationError(AppException):
    """Token was presented but its signature, structure or expiry is wrong."""

    def __init__(self, message: str = "Invalid or expired token", details: str | None = None):
        super().__init__(message, status_code=403, details=details)


class StoreError(AppException):
    def __init__(self, details: str):
        super().__init__("Storage failure", status_code=500, details=details)


class ConfigurationError(RuntimeError):
    pass


def auth_error_response(exc: AppException) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, exc.details),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
        return JSONResponse(status_code=400, content=exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        logger.info("Rejected malformed body on %s %s: %s", request.method, request.url.path, details)
        return JSONResponse(
            status_code=400,
            content=error_response("Some of fields empty", details),
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, "The account store could not complete the operation"),
        )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code == 401:
            return auth_error_response(exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, exc.details),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
