"""Tests for calendar normalization and the Google OAuth/Calendar client."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse
from zoneinfo import ZoneInfo

import httpx
import pytest

from weekplanner.core.errors import CalendarAuthError, CalendarSyncError
from weekplanner.services.calendar import (
    CalendarSession,
    GoogleCalendarClient,
    OAuthClientConfig,
    normalize_calendar_event,
    normalize_calendar_events,
)
from weekplanner.services.calendar.google import CALENDAR_SCOPE

NEW_YORK = ZoneInfo("America/New_York")
OAUTH = OAuthClientConfig(client_id="client-123", client_secret="shh", redirect_uri="http://localhost:8000/oauth2callback")


def test_google_item_is_normalized() -> None:
    event = normalize_calendar_event(
        {
            "summary": "Lecture",
            "start": {"dateTime": "2024-01-08T10:00:00-05:00"},
            "end": {"dateTime": "2024-01-08T11:15:00-05:00"},
        },
        NEW_YORK,
    )
    assert event.title == "Lecture"
    assert event.start == datetime(2024, 1, 8, 15, 0, tzinfo=timezone.utc)
    assert event.end - event.start == timedelta(minutes=75)


def test_all_day_event_starts_at_local_midnight() -> None:
    event = normalize_calendar_event(
        {"summary": "Holiday", "start": {"date": "2024-01-15"}, "end": {"date": "2024-01-16"}},
        NEW_YORK,
    )
    assert event.start == datetime(2024, 1, 15, tzinfo=NEW_YORK)


def test_already_normalized_record_with_z_suffix() -> None:
    event = normalize_calendar_event(
        {"title": "Dentist", "startTime": "2024-01-03T14:00:00Z", "endTime": "2024-01-03T14:30:00Z"},
        NEW_YORK,
    )
    assert event.start == datetime(2024, 1, 3, 14, 0, tzinfo=timezone.utc)
    assert event.end == datetime(2024, 1, 3, 14, 30, tzinfo=timezone.utc)


def test_missing_title_and_bad_end() -> None:
    event = normalize_calendar_event({"start": "2024-01-03T09:00:00", "end": "garbage"}, NEW_YORK)
    assert event.title == "Untitled Event"
    assert event.end == event.start
    assert event.start.tzinfo == NEW_YORK


def test_records_without_start_are_skipped() -> None:
    events = normalize_calendar_events(
        [{"summary": "No start"}, "not a dict", {"title": "Ok", "start": "2024-01-03T09:00:00Z"}],
        NEW_YORK,
    )
    assert [event.title for event in events] == ["Ok"]


def test_authorization_url_requests_offline_readonly_access() -> None:
    url = GoogleCalendarClient(OAUTH).authorization_url(state="abc")
    query = parse_qs(urlparse(url).query)
    assert query["client_id"] == ["client-123"]
    assert query["scope"] == [CALENDAR_SCOPE]
    assert query["access_type"] == ["offline"]
    assert query["state"] == ["abc"]


def test_exchange_code_builds_session() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"access_token": "at-1", "refresh_token": "rt-1", "expires_in": 3600})

    session = GoogleCalendarClient(OAUTH, transport=httpx.MockTransport(handler)).exchange_code("code-xyz")

    assert seen["form"]["code"] == ["code-xyz"]
    assert seen["form"]["grant_type"] == ["authorization_code"]
    assert session.access_token == "at-1"
    assert session.refresh_token == "rt-1"
    assert not session.is_expired()


def test_refresh_keeps_previous_refresh_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"access_token": "at-2", "expires_in": 3600})

    client = GoogleCalendarClient(OAUTH, transport=httpx.MockTransport(handler))
    expired = CalendarSession(
        access_token="at-1",
        refresh_token="rt-1",
        expires_at=datetime.now(timezone.utc) - timedelta(minutes=5),
    )

    fresh = client.ensure_fresh(expired)

    assert fresh.access_token == "at-2"
    assert fresh.refresh_token == "rt-1"


def test_expired_session_without_refresh_token_fails() -> None:
    expired = CalendarSession(access_token="at-1", expires_at=datetime.now(timezone.utc) - timedelta(minutes=5))
    with pytest.raises(CalendarAuthError):
        GoogleCalendarClient(OAUTH).ensure_fresh(expired)


def test_token_endpoint_error_raises_auth_error() -> None:
    client = GoogleCalendarClient(OAUTH, transport=httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "invalid_grant"})))
    with pytest.raises(CalendarAuthError):
        client.exchange_code("bad")


def test_list_upcoming_events_sends_bearer_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"items": [{"summary": "Lecture"}]})

    client = GoogleCalendarClient(OAUTH, transport=httpx.MockTransport(handler), max_results=25, window_days=7)
    now = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)

    items = client.list_upcoming_events(CalendarSession(access_token="at-1"), now=now)

    assert items == [{"summary": "Lecture"}]
    assert seen["auth"] == "Bearer at-1"
    assert seen["params"]["maxResults"] == "25"
    assert seen["params"]["singleEvents"] == "true"
    assert seen["params"]["timeMax"] == (now + timedelta(days=7)).isoformat()


def test_list_upcoming_events_failure() -> None:
    client = GoogleCalendarClient(OAUTH, transport=httpx.MockTransport(lambda request: httpx.Response(401, text="nope")))
    with pytest.raises(CalendarSyncError):
        client.list_upcoming_events(CalendarSession(access_token="stale"))


def test_session_payload_survives_storage() -> None:
    session = CalendarSession(
        access_token="at-1",
        refresh_token="rt-1",
        expires_at=datetime(2024, 1, 3, 13, 0, tzinfo=timezone.utc),
    )
    assert CalendarSession.from_payload(session.to_payload()) == session
