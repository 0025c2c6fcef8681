from __future__ import annotations

from .logging import configure_logging, log_time, logged

__all__ = [
    "configure_logging",
    "log_time",
    "logged",
]
