"""SuiteApp records adapter."""

from __future__ import annotations

from .client import RecordsOperation, SuiteAppAPIError, SuiteAppClient

__all__ = [
    "RecordsOperation",
    "SuiteAppAPIError",
    "SuiteAppClient",
]
