"""HTTP client for the text-generation relay."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from weekplanner.core.errors import RequestFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


class TextGenerator(Protocol):
    def generate(self, prompt: str, model_id: str) -> str: ...


def extract_output_text(body: Any) -> Optional[str]:
    """Find the generated text in a relay body.

    Checks `output` first, then `text`, then Gemini-style
    `candidates[0].content.parts[0].text` and OpenAI-style
    `choices[0].message.content`.
    """
    if not isinstance(body, dict):
        return None
    for key in ("output", "text"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    try:
        value = body["candidates"][0]["content"]["parts"][0]["text"]
        if isinstance(value, str) and value.strip():
            return value
    except (KeyError, IndexError, TypeError):
        pass
    try:
        value = body["choices"][0]["message"]["content"]
        if isinstance(value, str) and value.strip():
            return value
    except (KeyError, IndexError, TypeError):
        pass
    return None


class GenerationClient:
    """One POST per `generate` call: no retries, no streaming.

    `transport` exists so tests can plug in `httpx.MockTransport`.
    """

    def __init__(
        self,
        relay_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.relay_url = relay_url
        self.timeout = timeout
        self._transport = transport

    def generate(self, prompt: str, model_id: str) -> str:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.relay_url, json={"prompt": prompt, "model": model_id})
        except httpx.RequestError as exc:
            logger.warning("Generation relay unreachable at %s: %s", self.relay_url, exc)
            raise RequestFailure(f"relay unreachable: {exc}", reason="unreachable") from exc

        if response.is_error:
            detail = _error_detail(response)
            logger.warning("Generation relay returned %s: %s", response.status_code, detail)
            raise RequestFailure(
                f"relay returned {response.status_code}: {detail}",
                status_code=response.status_code,
                reason="status",
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise RequestFailure("relay body is not JSON", status_code=response.status_code, reason="no_text") from exc

        text = extract_output_text(body)
        if text is None:
            raise RequestFailure("relay body has no text field", status_code=response.status_code, reason="no_text")
        return text


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)[:200]
    return str(body)[:200]
