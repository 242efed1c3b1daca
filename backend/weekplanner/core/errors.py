"""Error types raised by the planner pipeline and its collaborators."""
from __future__ import annotations

SCHEDULE_TRANSPORT_MESSAGE = "Failed to generate weekly schedule. Please try again."
SCHEDULE_FORMAT_MESSAGE = "The planner returned a schedule in an invalid format. Please try again."
FEEDBACK_TRANSPORT_MESSAGE = "Failed to generate study feedback."
CALENDAR_SYNC_MESSAGE = "Failed to sync calendar."


class PlannerError(Exception):
    """Base exception for planner errors.

    Attributes:
        user_message: Text safe to show to the end user.
        kind: Short failure label used in metrics and logs.
    """

    kind = "planner"
    user_message = SCHEDULE_TRANSPORT_MESSAGE

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class RequestFailure(PlannerError):
    """Raised when the generation relay is unreachable, fails, or returns no text."""

    kind = "transport"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str = "unreachable",
        user_message: str | None = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.status_code = status_code
        self.reason = reason


class MalformedResponseError(PlannerError):
    """Raised when returned text holds no parseable JSON payload."""

    kind = "malformed"
    user_message = SCHEDULE_FORMAT_MESSAGE

    def __init__(self, message: str, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ShapeMismatchError(MalformedResponseError):
    """Raised when parsed JSON lacks the structure of a weekly schedule."""

    kind = "shape"


class RelayError(Exception):
    """Raised when the text-generation provider behind the relay fails."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarAuthError(Exception):
    """Raised when the OAuth exchange or token refresh fails."""


class CalendarSyncError(Exception):
    """Raised when listing calendar events fails."""
