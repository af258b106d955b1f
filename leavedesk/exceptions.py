import logging
from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    context: dict[str, Any] | None = None


class AppError(Exception):
    """Base application exception."""

    code = "AppError"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context
        super().__init__(self.message)


class UnauthorizedError(AppError):
    """No session, or the session lacks the required role."""

    code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized", status_code: int = status.HTTP_403_FORBIDDEN) -> None:
        super().__init__(message, status_code=status_code)


class NotFoundError(AppError):
    code = "NotFound"

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class InvalidDateRangeError(AppError):
    code = "InvalidDateRange"

    def __init__(self, message: str = "From date cannot be after to date") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class EmptyRangeError(AppError):
    code = "EmptyRange"

    def __init__(self, message: str = "No working days in the selected date range") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class InsufficientBalanceError(AppError):
    """Available balance is lower than the requested working days."""

    code = "InsufficientBalance"

    def __init__(self, leave_type: str, available: Decimal | int, required: int) -> None:
        self.leave_type = leave_type
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient {leave_type} balance. Available: {available}, Required: {required}",
            status_code=status.HTTP_400_BAD_REQUEST,
            context={"leave_type": leave_type, "available": str(available), "required": required},
        )


class AlreadyProcessedError(AppError):
    code = "AlreadyProcessed"

    def __init__(self, message: str = "Request has already been processed") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class StoreFailureError(AppError):
    """The underlying persistence operation failed. Safe to retry."""

    code = "StoreFailure"

    def __init__(self, message: str = "Storage is temporarily unavailable, please try again") -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.code,
            detail=exc.message,
            status_code=exc.status_code,
            context=exc.context,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


async def _store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure while handling %s %s", request.method, request.url.path, exc_info=exc)
    return await _app_exception_handler(request, StoreFailureError())


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _store_exception_handler)  # type: ignore[arg-type]
