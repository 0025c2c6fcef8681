"""Shared logging helpers for suitesync."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def log_time[T](call: Callable[[], T], label: str, *, logger: logging.Logger = log) -> T:
    """Run ``call`` and log how long it took under ``label``."""

    started = time.perf_counter()
    try:
        return call()
    finally:
        elapsed = time.perf_counter() - started
        logger.debug("%s took %.3fs", label, elapsed)


def logged[**P, T](label: str) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Wrap a client call with timing and failure logging.

    Exceptions are logged and re-raised unchanged.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return log_time(lambda: func(*args, **kwargs), label)
            except Exception:
                log.exception("failed to run client command %s", label)
                raise

        return wrapper

    return decorator
