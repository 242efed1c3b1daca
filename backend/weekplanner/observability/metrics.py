"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, Optional

from weekplanner.observability.tracing import trace

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short Opik trace; no-op when Opik is disabled."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)

    try:
        with trace(f"metric:{name}", metadata=payload):
            pass
    except Exception as exc:  # pragma: no cover - SDK failure
        logger.debug("Unable to record metric %s: %s", name, exc)


def elapsed_ms(started: float) -> float:
    """Milliseconds since a `perf_counter()` reading."""
    return round((perf_counter() - started) * 1000, 2)
