"""Process logging configuration for the API runtime."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def configure_logging(*, level: str) -> None:
    """Configure root logging once and keep driver chatter at WARNING.

    Driver loggers follow the runtime level only when it is DEBUG.
    """

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(resolved_level)

    driver_level = resolved_level if resolved_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)
