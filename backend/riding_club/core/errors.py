"""
Domain errors and their HTTP mapping.

Services raise these; the handlers registered by ``register_error_handlers``
turn them into JSON responses so no booking failure escapes as a 500.
"""

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from riding_club.core.logging import get_logger

if TYPE_CHECKING:
    from riding_club.services.results import FanOutResult

logger = get_logger(__name__)


class BookingError(Exception):
    """Base class for all riding club domain errors."""

    message = "Booking operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class SubmissionValidationError(BookingError):
    """One or more submission fields are invalid. Carries every problem found."""

    message = "Booking submission is invalid"

    def __init__(self, errors: list[str]):
        super().__init__(self.message)
        self.errors = list(errors)


class RecurrenceError(BookingError):
    message = "Invalid recurrence range"


class BookingNotFoundError(BookingError):
    message = "Booking not found"

    def __init__(self, booking_id: str):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class MessageNotFoundError(BookingError):
    def __init__(self, message_id: str):
        super().__init__(f"Message {message_id} not found")
        self.message_id = message_id


class ProfileNotFoundError(BookingError):
    def __init__(self, user_id: str):
        super().__init__(f"Profile for user {user_id} not found")
        self.user_id = user_id


class InvalidTransitionError(BookingError):
    message = "Status transition not supported"


class BackendUnavailable(BookingError):
    """The remote store could not be reached. Handled inside the gateway."""

    message = "Remote booking store unavailable"


class PartialFailureError(BookingError):
    """A fan-out where some, but not all, members were written."""

    def __init__(self, result: "FanOutResult"):
        super().__init__(
            f"{result.operation} applied to {len(result.succeeded)} of {result.total} bookings"
        )
        self.result = result


class GroupOperationFailedError(BookingError):
    """A fan-out where no member could be written."""

    def __init__(self, result: "FanOutResult"):
        super().__init__(f"{result.operation} failed for all {result.total} bookings")
        self.result = result


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SubmissionValidationError)
    async def validation_handler(request: Request, exc: SubmissionValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RecurrenceError)
    async def recurrence_handler(request: Request, exc: RecurrenceError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "errors": [exc.message]},
        )

    @app.exception_handler(BookingNotFoundError)
    @app.exception_handler(MessageNotFoundError)
    @app.exception_handler(ProfileNotFoundError)
    async def not_found_handler(request: Request, exc: BookingError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(InvalidTransitionError)
    async def transition_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})

    @app.exception_handler(PartialFailureError)
    async def partial_handler(request: Request, exc: PartialFailureError) -> JSONResponse:
        logger.warning("request_partial_failure", detail=exc.message)
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content={"detail": exc.message, **exc.result.as_dict()},
        )

    @app.exception_handler(GroupOperationFailedError)
    async def failed_handler(request: Request, exc: GroupOperationFailedError) -> JSONResponse:
        logger.error("request_group_failure", detail=exc.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message, **exc.result.as_dict()},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Same body shape as SubmissionValidationError
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"] if part != "body")
            errors.append(f"{location}: {error['msg']}" if location else error["msg"])
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Request is invalid", "errors": errors},
        )
