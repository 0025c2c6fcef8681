"""Dependency-aware deploy of change groups.

Flow for SDF create/update groups:
1) serialize every changed element once and build the dependency graph
2) submit the batch
3) on a typed failure, drop the failed objects and everything depending on them
4) resubmit until the account accepts the batch or nothing is left
"""

from __future__ import annotations

from .client import DeployClient, SuiteAppNotConfiguredError, UnsupportedGroupError
from .dependencies import DependencyInfo, ObjectNode, build_dependency_info
from .failures import (
    DeployError,
    DeployFailure,
    FailureKind,
    FeaturesDeployFailure,
    ManifestValidationFailure,
    MissingManifestFeaturesFailure,
    ObjectsDeployFailure,
    SettingsDeployFailure,
    SubmissionOutcome,
    SubmissionSucceeded,
    UnclassifiedFailure,
    classify_failure,
)
from .graph import Graph, GraphNode
from .groups import DeployGroup
from .loop import run_deploy_loop
from .reducer import Reduction, ReductionAction, reduce_batch
from .results import DeployLoopState, DeployResult

__all__ = [
    "DependencyInfo",
    "DeployClient",
    "DeployError",
    "DeployFailure",
    "DeployGroup",
    "DeployLoopState",
    "DeployResult",
    "FailureKind",
    "FeaturesDeployFailure",
    "Graph",
    "GraphNode",
    "ManifestValidationFailure",
    "MissingManifestFeaturesFailure",
    "ObjectNode",
    "ObjectsDeployFailure",
    "Reduction",
    "ReductionAction",
    "SettingsDeployFailure",
    "SubmissionOutcome",
    "SubmissionSucceeded",
    "SuiteAppNotConfiguredError",
    "UnclassifiedFailure",
    "UnsupportedGroupError",
    "build_dependency_info",
    "classify_failure",
    "reduce_batch",
    "run_deploy_loop",
]
