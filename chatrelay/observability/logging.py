"""One-line request events, ``event=<name> k=v ...``."""

from __future__ import annotations

from chatrelay.util.logger import get_logger

_events = get_logger("events")


def log_event(event: str, **fields: object) -> None:
    rendered = " ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
    _events.info("event=%s %s", event, rendered)
