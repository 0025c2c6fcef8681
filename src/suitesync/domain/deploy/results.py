"""Deploy outcome returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from suitesync.domain.model import Change


class DeployLoopState(StrEnum):
    SUBMITTING = "submitting"
    REDUCING_AFTER_FAILURE = "reducing_after_failure"
    SUCCEEDED = "succeeded"
    ABORTED_EMPTY = "aborted_empty"
    ABORTED_WITH_PARTIAL = "aborted_with_partial"


@dataclass(slots=True)
class DeployResult:
    """Errors of every rejected attempt plus the changes that were applied.

    Changes that are neither applied nor named by an error were dropped because
    they depend on a failed object.
    """

    errors: list[Exception] = field(default_factory=list[Exception])
    applied_changes: list[Change] = field(default_factory=list["Change"])
    elem_id_to_internal_id: dict[str, str] = field(default_factory=dict[str, str])
    final_state: DeployLoopState | None = None
