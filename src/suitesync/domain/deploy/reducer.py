"""Batch reduction after a rejected submission.

Each failure kind maps to one rule deciding how the deploy loop continues:
drop some changes and resubmit, resubmit unchanged, stop with nothing applied,
or stop with a partial result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from suitesync.domain.model import CONFIG_FEATURES, SCRIPT_ID, InstanceElement, get_script_id

from .failures import (
    FeaturesDeployFailure,
    ManifestValidationFailure,
    MissingManifestFeaturesFailure,
    ObjectsDeployFailure,
    SettingsDeployFailure,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from suitesync.config.deploy import AdditionalDependencies
    from suitesync.domain.model import Change

    from .dependencies import DependencyInfo
    from .failures import DeployFailure

log = getLogger(__name__)


class ReductionAction(StrEnum):
    REMOVE = "remove"
    RETRY = "retry"
    ABORT = "abort"
    FINISH = "finish"


@dataclass(frozen=True, slots=True, kw_only=True)
class Reduction:
    action: ReductionAction
    to_remove: frozenset[str] = field(default_factory=frozenset[str])
    applied: tuple[Change, ...] = ()
    discard_error: bool = False

    @classmethod
    def remove(cls, names: Iterable[str]) -> Reduction:
        return cls(action=ReductionAction.REMOVE, to_remove=frozenset(names))

    @classmethod
    def retry(cls, *, discard_error: bool = False) -> Reduction:
        return cls(action=ReductionAction.RETRY, discard_error=discard_error)

    @classmethod
    def abort(cls) -> Reduction:
        return cls(action=ReductionAction.ABORT)

    @classmethod
    def finish(cls, applied: Iterable[Change]) -> Reduction:
        return cls(action=ReductionAction.FINISH, applied=tuple(applied))


def reduce_batch(
    failure: DeployFailure,
    batch: Sequence[Change],
    *,
    dependency_info: DependencyInfo,
    additional_dependencies: AdditionalDependencies,
) -> Reduction:
    if isinstance(failure, ManifestValidationFailure):
        return Reduction.remove(failed_manifest_elem_ids(failure, batch, dependency_info))
    if isinstance(failure, MissingManifestFeaturesFailure):
        return extend_manifest_features(failure, additional_dependencies)
    if isinstance(failure, FeaturesDeployFailure):
        return Reduction.finish(features_partial_success(failure, batch))
    if isinstance(failure, ObjectsDeployFailure):
        return Reduction.remove(failed_objects_elem_ids(failure, batch, dependency_info))
    if isinstance(failure, SettingsDeployFailure):
        return reduce_settings_failure(failure, batch, dependency_info)
    log.debug("unclassified deploy failure: %s", failure.message)
    return Reduction.abort()


def failed_manifest_elem_ids(
    failure: ManifestValidationFailure,
    batch: Sequence[Change],
    dependency_info: DependencyInfo,
) -> frozenset[str]:
    """Drop elements referencing script ids the account does not have."""

    missing = set(failure.missing_dependency_script_ids)
    base_elem_ids = [
        elem_full_name
        for elem_full_name, references in dependency_info.dependency_map.items()
        if not missing.isdisjoint(references)
    ]
    to_remove = _restrict_to_batch(dependency_info.transitive_dependents(base_elem_ids), batch)
    log.debug(
        "remove elements which contain a scriptid that doesnt exist in target account: %s",
        sorted(to_remove),
    )
    return to_remove or _batch_names(batch)


def extend_manifest_features(
    failure: MissingManifestFeaturesFailure,
    additional_dependencies: AdditionalDependencies,
) -> Reduction:
    """Declare the missing features in the manifest and resubmit the same batch."""

    included = additional_dependencies.include.features
    if not failure.missing_features or set(failure.missing_features).issubset(included):
        log.debug(
            "missing manifest features are already included: %s",
            list(failure.missing_features),
        )
        return Reduction.abort()
    included.extend(feature for feature in failure.missing_features if feature not in included)
    log.debug("added missing features to the manifest: %s", list(failure.missing_features))
    return Reduction.retry(discard_error=True)


def features_partial_success(
    failure: FeaturesDeployFailure,
    batch: Sequence[Change],
) -> list[Change]:
    """Everything but some features was deployed.

    The features change itself counts as applied when nothing is left to change
    once the excluded features are ignored.
    """

    applied: list[Change] = []
    for change in batch:
        if change.type_name != CONFIG_FEATURES:
            applied.append(change)
            continue
        before = _features_by_id(change.before, failure.excluded_feature_ids)
        after = _features_by_id(change.after, failure.excluded_feature_ids)
        if before == after:
            applied.append(change)
        else:
            log.debug(
                "features change %s was not fully deployed: %s",
                change.full_name,
                sorted(failure.excluded_feature_ids),
            )
    return applied


def failed_objects_elem_ids(
    failure: ObjectsDeployFailure,
    batch: Sequence[Change],
    dependency_info: DependencyInfo,
) -> frozenset[str]:
    graph = dependency_info.dependency_graph
    batch_names = _batch_names(batch)
    failed_elem_ids: set[str] = set()
    for script_id in failure.failed_objects:
        node = graph.find_by_field(SCRIPT_ID, script_id)
        if node is not None and node.value.elem_full_name in batch_names:
            failed_elem_ids.add(node.value.elem_full_name)
    # changes the graph does not know about are matched directly
    failed_elem_ids.update(
        change.full_name
        for change in batch
        if get_script_id(change.data) in failure.failed_objects
        and graph.find_by_key(change.full_name) is None
    )
    to_remove = _restrict_to_batch(
        dependency_info.transitive_dependents(failed_elem_ids) | failed_elem_ids, batch
    )
    log.debug("objects deploy error: sdf failed to deploy: %s", sorted(to_remove))
    # in case we cannot find the failed objects we treat all of them as failed
    return to_remove or batch_names


def reduce_settings_failure(
    failure: SettingsDeployFailure,
    batch: Sequence[Change],
    dependency_info: DependencyInfo,
) -> Reduction:
    failed_types = failure.failed_config_types
    matching = [change.full_name for change in batch if change.type_name in failed_types]
    if not matching:
        log.debug(
            "settings deploy error: no changes matched the failed config types: %s",
            sorted(failed_types),
        )
        return Reduction.abort()
    log.debug("settings deploy error: sdf failed to deploy: %s", sorted(failed_types))
    to_remove = dependency_info.transitive_dependents(matching) | set(matching)
    return Reduction.remove(_restrict_to_batch(to_remove, batch))


def _features_by_id(
    element: object,
    excluded_ids: frozenset[str],
) -> dict[str, Mapping[str, Any]]:
    if not isinstance(element, InstanceElement):
        return {}
    features = element.value.get("feature") or []
    by_id: dict[str, Mapping[str, Any]] = {}
    for feature in features:
        feature_id = feature.get("id")
        if feature_id is None or feature_id in excluded_ids:
            continue
        by_id[feature_id] = feature
    return by_id


def _batch_names(batch: Sequence[Change]) -> frozenset[str]:
    return frozenset(change.full_name for change in batch)


def _restrict_to_batch(names: Iterable[str], batch: Sequence[Change]) -> frozenset[str]:
    return frozenset(names) & _batch_names(batch)
