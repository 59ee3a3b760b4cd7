"""Run the calendar API with uvicorn: ``python -m calendar_api``."""

from __future__ import annotations

import uvicorn

from calendar_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "calendar_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
