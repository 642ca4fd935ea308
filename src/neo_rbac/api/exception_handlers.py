"""
Exception handlers for the RBAC administration API.

Translates the neo-rbac exception hierarchy into JSON error responses.
"""
from typing import Any, Callable, Dict, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AuthorizationError, NeoRBACError, create_error_response, get_http_status_code
)

logger = logging.getLogger(__name__)

ResponseFormatter = Callable[[str, Optional[list]], Dict[str, Any]]


class ExceptionHandlerRegistry:
    """Registers neo-rbac exception handlers on an application."""

    def __init__(self, response_formatter: Optional[ResponseFormatter] = None, is_production: bool = True):
        """
        Args:
            response_formatter: Function to format error responses
            is_production: Hide unexpected error messages when True
        """
        self.response_formatter = response_formatter or self._default_response_formatter
        self.is_production = is_production

    def _default_response_formatter(self, message: str, errors: Optional[list] = None) -> Dict[str, Any]:
        return {
            "success": False,
            "message": message,
            "errors": errors or [],
            "data": None,
        }

    def register_handlers(self, app: FastAPI) -> None:
        @app.exception_handler(NeoRBACError)
        async def rbac_exception_handler(request: Request, exc: NeoRBACError):
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")

            if isinstance(exc, AuthorizationError):
                # Only the public message reaches the client
                body = self.response_formatter(message=exc.message)
            else:
                body = self.response_formatter(
                    message=exc.message,
                    errors=[create_error_response(exc)["error"]]
                )
            return JSONResponse(status_code=status_code, content=body)

        @app.exception_handler(ValueError)
        async def value_error_handler(request: Request, exc: ValueError):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=self.response_formatter(message=str(exc))
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=self.response_formatter(message=message)
            )


def register_exception_handlers(
    app: FastAPI,
    response_formatter: Optional[ResponseFormatter] = None,
    is_production: bool = True
) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    ExceptionHandlerRegistry(response_formatter, is_production).register_handlers(app)
