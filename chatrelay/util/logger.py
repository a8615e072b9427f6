"""Project logger: stderr always, rotating file when ``log_file`` is writable."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from chatrelay.config.settings import settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 10


def resolve_level(raw: str | None) -> int:
    level = logging.getLevelName(str(raw or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.Handler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    except OSError:
        # read-only filesystem; stderr is enough
        return None
    handler.setFormatter(formatter)
    return handler


def _build_logger() -> logging.Logger:
    root = logging.getLogger("chatrelay")
    if root.handlers:
        return root

    root.setLevel(resolve_level(settings.log_level))
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if settings.log_file:
        handler = _file_handler(Path(settings.log_file), formatter)
        if handler is not None:
            root.addHandler(handler)

    root.propagate = False
    return root


logger = _build_logger()


def get_logger(name: str) -> logging.Logger:
    return logger.getChild(name)
