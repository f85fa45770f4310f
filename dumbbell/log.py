"""Structured logging helpers for the view-model engine."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

_LOGGER_NAME = "dumbbell"


def get_logger() -> logging.Logger:
    """Return the shared engine logger, configuring a stream handler once."""

    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def log_event(
    event: str,
    payload: dict[str, Any] | None = None,
    *,
    level: str = "info",
) -> None:
    """Write one structured log event as a JSON line.

    Args:
        event: Stable event name (e.g. `view_model_built`).
        payload: Optional extra fields merged into the record.
        level: Logging level name used to pick the logger method.
    """

    logger = get_logger()
    data: dict[str, Any] = {
        "event": event,
        "ts": datetime.now(UTC).isoformat(),
        "service": "dumbbell",
        "level": level.lower(),
    }
    if payload:
        data.update(payload)

    message = json.dumps(data, ensure_ascii=False, default=str)
    writer = getattr(logger, level.lower(), logger.info)
    writer("%s", message)
