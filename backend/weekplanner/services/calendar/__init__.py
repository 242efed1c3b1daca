"""Calendar collaborator: OAuth session handling and event normalization."""
from weekplanner.services.calendar.events import normalize_calendar_event, normalize_calendar_events
from weekplanner.services.calendar.google import CalendarSession, GoogleCalendarClient, OAuthClientConfig

__all__ = [
    "CalendarSession",
    "GoogleCalendarClient",
    "OAuthClientConfig",
    "normalize_calendar_event",
    "normalize_calendar_events",
]
