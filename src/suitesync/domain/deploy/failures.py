"""Typed outcomes of one deploy submission.

A submission either succeeds or reports exactly one failure. Failures form a
closed union discriminated by ``kind``; each variant carries the data needed
to find the objects it affects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal


class FailureKind(StrEnum):
    MANIFEST_VALIDATION = "manifest_validation"
    MISSING_MANIFEST_FEATURES = "missing_manifest_features"
    FEATURES_DEPLOY = "features_deploy"
    OBJECTS_DEPLOY = "objects_deploy"
    SETTINGS_DEPLOY = "settings_deploy"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True, slots=True, kw_only=True)
class SubmissionSucceeded:
    kind: Literal["succeeded"] = "succeeded"


@dataclass(frozen=True, slots=True, kw_only=True)
class ManifestValidationFailure:
    """The manifest references objects that do not exist in the account."""

    message: str
    missing_dependency_script_ids: tuple[str, ...] = ()
    kind: Literal[FailureKind.MANIFEST_VALIDATION] = FailureKind.MANIFEST_VALIDATION


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingManifestFeaturesFailure:
    """The objects need account features the manifest does not declare."""

    message: str
    missing_features: tuple[str, ...] = ()
    kind: Literal[FailureKind.MISSING_MANIFEST_FEATURES] = FailureKind.MISSING_MANIFEST_FEATURES


@dataclass(frozen=True, slots=True, kw_only=True)
class FeaturesDeployFailure:
    """Everything was deployed except some entries of the features configuration."""

    message: str
    excluded_feature_ids: frozenset[str] = field(default_factory=frozenset[str])
    kind: Literal[FailureKind.FEATURES_DEPLOY] = FailureKind.FEATURES_DEPLOY


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectsDeployFailure:
    message: str
    failed_objects: frozenset[str] = field(default_factory=frozenset[str])
    kind: Literal[FailureKind.OBJECTS_DEPLOY] = FailureKind.OBJECTS_DEPLOY


@dataclass(frozen=True, slots=True, kw_only=True)
class SettingsDeployFailure:
    message: str
    failed_config_types: frozenset[str] = field(default_factory=frozenset[str])
    kind: Literal[FailureKind.SETTINGS_DEPLOY] = FailureKind.SETTINGS_DEPLOY


@dataclass(frozen=True, slots=True, kw_only=True)
class UnclassifiedFailure:
    message: str
    cause: BaseException | None = field(default=None, compare=False)
    kind: Literal[FailureKind.UNCLASSIFIED] = FailureKind.UNCLASSIFIED


type DeployFailure = (
    ManifestValidationFailure
    | MissingManifestFeaturesFailure
    | FeaturesDeployFailure
    | ObjectsDeployFailure
    | SettingsDeployFailure
    | UnclassifiedFailure
)
type SubmissionOutcome = SubmissionSucceeded | DeployFailure


class DeployError(Exception):
    """A rejected submission, as reported back to callers."""

    def __init__(self, failure: DeployFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> FailureKind:
        return self.failure.kind


def classify_failure(exc: Exception) -> DeployFailure:
    """Map an exception raised by a submitter onto the failure union."""

    if isinstance(exc, DeployError):
        return exc.failure
    message = str(exc) or type(exc).__name__
    return UnclassifiedFailure(message=message, cause=exc)
