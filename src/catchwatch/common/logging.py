"""Shared logging helpers for catchwatch."""

from __future__ import annotations

import logging
import os

# per-request chatter from the HTTP stack drowns the job's own tagged lines
_NOISY_LOGGERS = ("httpx", "httpcore", "hishel", "aiolimiter")


def resolve_log_level(default: int = logging.INFO) -> int:
    """Read ``LOG_LEVEL`` as a level name or number; unknown values keep ``default``."""

    raw = (os.getenv("LOG_LEVEL") or "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once.

    Lines carry the job phase tags (``[LANDINGS]``, ``[VESSEL-LOOKUP]`` ...) in the
    message, so the format keeps the logger name bracketed alongside them. Pass
    ``force=True`` to reconfigure during tests.
    """

    resolved = resolve_log_level() if level is None else level
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
