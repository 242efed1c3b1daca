"""Text-generation provider behind the /api/generate relay."""
from __future__ import annotations

import logging
from typing import Optional

import openai

from weekplanner.core.config import settings
from weekplanner.core.errors import RelayError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
PROMPT_LOG_CHARS = 100


def generate_text(prompt: str, model: Optional[str] = None, *, api_key: Optional[str] = None) -> str:
    """Send one prompt to the provider and return its text, stripped."""
    api_key = api_key or settings.openai_api_key
    if not api_key:
        raise RelayError("OPENAI_API_KEY is not configured", status_code=503)

    model_id = model or DEFAULT_MODEL
    logger.info("Relay prompt (model=%s): %s", model_id, prompt[:PROMPT_LOG_CHARS].replace("\n", " "))
    client = openai.OpenAI(api_key=api_key)
    try:
        completion = client.chat.completions.create(
            model=model_id,
            messages=[{"role": "user", "content": prompt}],
        )
    except openai.OpenAIError as exc:
        logger.error("Provider request failed: %s", exc)
        raise RelayError(str(exc) or "Generation request failed.") from exc

    text = _completion_text(completion)
    if not text:
        raise RelayError("Provider returned no text.")
    return text


def _completion_text(completion) -> str:
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError):
        return ""
    return (content or "").strip()
