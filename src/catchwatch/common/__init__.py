from __future__ import annotations

from .background import BackgroundTasks
from .logging import configure_logging

__all__ = [
    "BackgroundTasks",
    "configure_logging",
]
