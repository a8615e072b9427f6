import logging

from chatrelay.observability.logging import log_event
from chatrelay.util.logger import get_logger, resolve_level


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_resolve_level_accepts_any_case_and_falls_back_to_info():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level("verbose") == logging.INFO
    assert resolve_level(None) == logging.INFO


def test_log_event_renders_sorted_fields():
    events = get_logger("events")
    handler = _ListHandler()
    events.addHandler(handler)
    original_level = events.level
    events.setLevel(logging.INFO)
    try:
        log_event("chat_dispatch", stream=True, route="/stream", messages=2)
    finally:
        events.removeHandler(handler)
        events.setLevel(original_level)

    assert len(handler.records) == 1
    assert handler.records[0].getMessage() == "event=chat_dispatch messages=2 route='/stream' stream=True"
