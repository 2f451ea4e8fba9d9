import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.response import error_response


class SiteToolsError(Exception):
    """Base error for failures that are reported to the caller as `{"error": message}`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SiteToolsError):
    """A required third-party credential is not provisioned."""


class InvalidURLError(SiteToolsError):
    status_code = status.HTTP_400_BAD_REQUEST


class PageFetchError(SiteToolsError):
    """The target page itself could not be fetched."""


class AuditError(SiteToolsError):
    """The PageSpeed service failed or answered with something unusable."""


def add_exception_handlers(app):
    @app.exception_handler(SiteToolsError)
    async def site_tools_exception_handler(request: Request, exc: SiteToolsError):
        return error_response(message=exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            message="Invalid request body",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logging.exception(f"Unhandled exception: {exc}")
        return error_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
