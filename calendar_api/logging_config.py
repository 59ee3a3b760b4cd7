"""Process-wide logging configuration.

``configure_logging()`` sets the root logger level and format, with an
optional rotating file handler. Call it once at startup; later calls replace
the handlers it installed rather than stacking new ones.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_installed: list[logging.Handler] = []


def resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    resolved = getattr(logging, level.strip().upper(), None)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int | None = None, log_file: str | None = None) -> None:
    """Configure console logging, plus a rotating file when *log_file* is set."""
    resolved = resolve_level(level)
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(resolved)
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)
    _installed.append(console)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as exc:
            root.warning("Could not open log file %s: %s; logging to stderr only", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            _installed.append(file_handler)

    # Access logs duplicate the request log lines written by the API.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
