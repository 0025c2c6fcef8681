"""Ports used by the deploy pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from suitesync.config.deploy import AdditionalDependencies
    from suitesync.domain.deploy.failures import SubmissionOutcome
    from suitesync.domain.model import Element, InstanceElement


@dataclass(frozen=True, slots=True)
class CustomizationInfo:
    """Serialized form of one object as the account expects it."""

    type_name: str
    values: dict[str, Any] = field(default_factory=dict[str, Any])
    script_id: str | None = None


@dataclass(frozen=True, slots=True)
class SubmitContext:
    suite_app_id: str | None
    additional_dependencies: AdditionalDependencies
    validate_only: bool = False


@runtime_checkable
class Serializer(Protocol):
    """Turn one element into its serialized payloads; must be idempotent."""

    def __call__(self, element: Element) -> tuple[CustomizationInfo, ...]: ...


@runtime_checkable
class ReferenceExtractor(Protocol):
    """Return the script ids of other objects referenced by ``payload``."""

    def __call__(self, payload: CustomizationInfo) -> tuple[str, ...]: ...


@runtime_checkable
class SubmitPayloads(Protocol):
    """Submit one batch of payloads to the account.

    Implementations return a failure variant for rejections the account
    reports; anything raised instead is classified by the deploy loop.
    """

    def __call__(
        self,
        payloads: Sequence[CustomizationInfo],
        context: SubmitContext,
    ) -> SubmissionOutcome: ...


class RecordsDeployer(Protocol):
    """Record-level operations; each result is an internal id or an error."""

    def add_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]: ...

    def update_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]: ...

    def delete_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]: ...

    def delete_sdf_instances(
        self, instances: Sequence[InstanceElement]
    ) -> list[int | Exception]: ...


class CustomObjectsReader(Protocol):
    def get_custom_objects(self, type_names: Sequence[str]) -> list[CustomizationInfo]: ...


__all__ = [
    "CustomObjectsReader",
    "CustomizationInfo",
    "RecordsDeployer",
    "ReferenceExtractor",
    "Serializer",
    "SubmitContext",
    "SubmitPayloads",
]
