"""
Translation of store failures into the API's error taxonomy.

Business exceptions (HTTPException subclasses) travel through untouched.
Everything else coming out of a service call becomes a ServiceError, or a
TransientStoreError when the store timed out or could not be reached.
"""
import asyncio
from functools import wraps
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError

from quickcart.shared.exceptions import ConflictException
from quickcart.shared.utils import get_logger

UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate key")


class ServiceError(Exception):
    """A service operation failed for reasons other than bad input"""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)


class TransientStoreError(ServiceError):
    """The store timed out or could not be reached"""


class ErrorHandler:
    """Logs a failed operation once and raises its API-facing replacement"""

    def __init__(self, logger_name: str):
        self.logger = get_logger(logger_name)

    def handle_database_error(
        self, error: SQLAlchemyError, operation: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        context = context or {}
        detail = str(getattr(error, "orig", None) or error)

        if isinstance(error, IntegrityError):
            self.logger.error(f"Integrity violation while {operation}: {detail}", extra=context)
            if any(marker in detail.lower() for marker in UNIQUE_VIOLATION_MARKERS):
                raise ConflictException(detail=f"Conflicting record while {operation}")
            raise ServiceError(f"Integrity violation while {operation}: {detail}", error, context)

        if isinstance(error, (OperationalError, InterfaceError)):
            self.logger.error(f"Store unavailable while {operation}: {detail}", extra=context)
            raise TransientStoreError(f"Store unavailable while {operation}: {detail}", error, context)

        self.logger.error(f"Store error while {operation}: {detail}", extra=context)
        raise ServiceError(f"Store error while {operation}: {detail}", error, context)

    def handle_general_error(
        self, error: Exception, operation: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        context = context or {}

        if isinstance(error, ServiceError):
            raise error

        if isinstance(error, asyncio.TimeoutError):
            self.logger.error(f"Store query timed out while {operation}", extra=context)
            raise TransientStoreError(f"Store query timed out while {operation}", error, context)

        self.logger.error(f"Unexpected error while {operation}: {error}", extra=context, exc_info=True)
        raise ServiceError(f"Unexpected error while {operation}: {error}", error, context)


def handle_service_errors(operation: str):
    """Route exceptions of an async service method through its ErrorHandler"""

    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                error_handler = getattr(self, "_error_handler", None) or ErrorHandler(
                    type(self).__name__
                )
                context = {"method": func.__name__, "call_args": repr(args)[:100]}
                if isinstance(e, SQLAlchemyError):
                    error_handler.handle_database_error(e, operation, context)
                error_handler.handle_general_error(e, operation, context)

        return wrapper

    return decorator
