"""Google OAuth + Calendar REST collaborator.

The planner core never calls Google directly; it only sees the normalized
CalendarEvent records produced by `normalize_calendar_event`.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from weekplanner.core.errors import CalendarAuthError, CalendarSyncError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"
HTTP_TIMEOUT_SECONDS = 10.0
EXPIRY_SKEW = timedelta(seconds=60)


@dataclass(frozen=True)
class OAuthClientConfig:
    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass(frozen=True)
class CalendarSession:
    """Credentials obtained at callback time. Opaque to the planner core."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    token_type: str = "Bearer"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now + EXPIRY_SKEW >= self.expires_at

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["expires_at"] = self.expires_at.isoformat() if self.expires_at else None
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CalendarSession":
        expires_at = payload.get("expires_at")
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            token_type=payload.get("token_type") or "Bearer",
        )

    @classmethod
    def from_token_response(
        cls,
        data: Dict[str, Any],
        *,
        previous: Optional["CalendarSession"] = None,
        now: Optional[datetime] = None,
    ) -> "CalendarSession":
        access_token = data.get("access_token")
        if not access_token:
            raise CalendarAuthError("token response has no access_token")
        now = now or datetime.now(timezone.utc)
        expires_in = data.get("expires_in")
        return cls(
            access_token=access_token,
            # Google omits refresh_token on refresh responses; keep the old one.
            refresh_token=data.get("refresh_token") or (previous.refresh_token if previous else None),
            expires_at=now + timedelta(seconds=int(expires_in)) if expires_in else None,
            token_type=data.get("token_type") or "Bearer",
        )


class GoogleCalendarClient:
    def __init__(
        self,
        oauth: OAuthClientConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        max_results: int = 50,
        window_days: int = 28,
    ) -> None:
        self.oauth = oauth
        self._transport = transport
        self.max_results = max_results
        self.window_days = window_days

    def authorization_url(self, state: Optional[str] = None) -> str:
        params = {
            "client_id": self.oauth.client_id,
            "redirect_uri": self.oauth.redirect_uri,
            "response_type": "code",
            "scope": CALENDAR_SCOPE,
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> CalendarSession:
        logger.info("Exchanging Google authorization code for calendar credentials")
        data = self._token_request(
            {
                "client_id": self.oauth.client_id,
                "client_secret": self.oauth.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.oauth.redirect_uri,
            }
        )
        return CalendarSession.from_token_response(data)

    def refresh(self, session: CalendarSession) -> CalendarSession:
        if not session.refresh_token:
            raise CalendarAuthError("calendar session expired and has no refresh token")
        logger.info("Refreshing Google calendar access token")
        data = self._token_request(
            {
                "client_id": self.oauth.client_id,
                "client_secret": self.oauth.client_secret,
                "refresh_token": session.refresh_token,
                "grant_type": "refresh_token",
            }
        )
        return CalendarSession.from_token_response(data, previous=session)

    def ensure_fresh(self, session: CalendarSession) -> CalendarSession:
        return self.refresh(session) if session.is_expired() else session

    def list_upcoming_events(self, session: CalendarSession, *, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Raw provider items starting from `now` for the configured window."""
        now = now or datetime.now(timezone.utc)
        params = {
            "timeMin": now.isoformat(),
            "timeMax": (now + timedelta(days=self.window_days)).isoformat(),
            "maxResults": self.max_results,
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        headers = {"Authorization": f"{session.token_type} {session.access_token}"}
        try:
            with httpx.Client(timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = client.get(GOOGLE_EVENTS_URL, params=params, headers=headers)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Calendar listing failed: %s - %s", exc.response.status_code, exc.response.text[:200])
            raise CalendarSyncError(f"calendar listing returned {exc.response.status_code}") from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.error("Calendar listing failed: %s", exc)
            raise CalendarSyncError("calendar listing failed") from exc

        items = body.get("items") if isinstance(body, dict) else body
        return list(items or [])

    def _token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        try:
            with httpx.Client(timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = client.post(GOOGLE_TOKEN_URL, data=form)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Google token request failed: %s - %s", exc.response.status_code, exc.response.text[:200])
            raise CalendarAuthError(f"token endpoint returned {exc.response.status_code}") from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.error("Google token request failed: %s", exc)
            raise CalendarAuthError("token endpoint unreachable") from exc
