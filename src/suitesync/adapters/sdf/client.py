"""HTTP client for the SDF deploy service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from suitesync.adapters.http_resilience import ResilientClient
from suitesync.domain.deploy.failures import (
    FeaturesDeployFailure,
    ManifestValidationFailure,
    MissingManifestFeaturesFailure,
    ObjectsDeployFailure,
    SettingsDeployFailure,
    SubmissionSucceeded,
    UnclassifiedFailure,
)

from .schema import (
    DEPLOY_RESPONSE_ADAPTER,
    CustomObjectsResponse,
    DeployFailureBody,
    DeploySuccess,
    SdfErrorType,
)
from .translator import to_customization_info

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from suitesync.config.account import AccountConfig
    from suitesync.config.deploy import AdditionalDependencies
    from suitesync.config.http_resilience import ResilienceConfig
    from suitesync.domain.deploy.failures import SubmissionOutcome
    from suitesync.domain.ports import CustomizationInfo, SubmitContext

log = getLogger(__name__)

DEPLOY_PATH = "sdf/deploy"
OBJECTS_PATH = "sdf/objects"


class SdfAPIError(RuntimeError):
    """Raised when the deploy service returns an unexpected response."""


class SdfClient:
    """Low-level HTTP client for SDF deploys and custom object reads."""

    def __init__(
        self,
        *,
        config: AccountConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def deploy(
        self,
        payloads: Sequence[CustomizationInfo],
        context: SubmitContext,
    ) -> SubmissionOutcome:
        return asyncio.run(self._deploy_async(payloads, context))

    def get_custom_objects(self, type_names: Sequence[str]) -> list[CustomizationInfo]:
        return asyncio.run(self._get_custom_objects_async(type_names))

    async def _deploy_async(
        self,
        payloads: Sequence[CustomizationInfo],
        context: SubmitContext,
    ) -> SubmissionOutcome:
        body = {
            "suiteAppId": context.suite_app_id,
            "validateOnly": context.validate_only,
            "manifest": build_manifest(context.additional_dependencies),
            "objects": [
                {"type": payload.type_name, "scriptid": payload.script_id, "values": payload.values}
                for payload in payloads
            ],
        }
        async with self._client_factory(self._resilience) as client:
            response = await client.post(DEPLOY_PATH, json=body)

        if response.status_code >= httpx.codes.INTERNAL_SERVER_ERROR:
            response.raise_for_status()
        try:
            parsed = DEPLOY_RESPONSE_ADAPTER.validate_json(response.content)
        except ValidationError as exc:
            response.raise_for_status()
            raise SdfAPIError("Unexpected SDF deploy response payload") from exc
        return to_submission_outcome(parsed)

    async def _get_custom_objects_async(
        self,
        type_names: Sequence[str],
    ) -> list[CustomizationInfo]:
        params = [("type", type_name) for type_name in type_names]
        async with self._client_factory(self._resilience) as client:
            response = await client.get(OBJECTS_PATH, params=params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise SdfAPIError("Unexpected SDF objects response payload")
        objects = CustomObjectsResponse.model_validate(payload).objects
        log.debug("fetched %d custom objects of types %s", len(objects), list(type_names))
        return [to_customization_info(item) for item in objects]


def build_manifest(additional_dependencies: AdditionalDependencies) -> dict[str, Any]:
    include = additional_dependencies.include
    exclude = additional_dependencies.exclude
    return {
        "features": {
            "required": [f for f in include.features if f not in exclude.features],
            "excluded": list(exclude.features),
        },
        "objects": {"included": list(include.objects), "excluded": list(exclude.objects)},
        "files": {"included": list(include.files), "excluded": list(exclude.files)},
    }


def to_submission_outcome(body: DeploySuccess | DeployFailureBody) -> SubmissionOutcome:
    if isinstance(body, DeploySuccess):
        return SubmissionSucceeded()

    message = body.message or f"SDF deploy failed: {body.error_type}"
    if body.error_type == SdfErrorType.MANIFEST_VALIDATION:
        return ManifestValidationFailure(
            message=message,
            missing_dependency_script_ids=tuple(body.missing_dependency_script_ids),
        )
    if body.error_type == SdfErrorType.MISSING_MANIFEST_FEATURES:
        return MissingManifestFeaturesFailure(
            message=message,
            missing_features=tuple(body.missing_features),
        )
    if body.error_type == SdfErrorType.FEATURES_DEPLOY:
        return FeaturesDeployFailure(
            message=message,
            excluded_feature_ids=frozenset(body.excluded_feature_ids),
        )
    if body.error_type == SdfErrorType.OBJECTS_DEPLOY:
        return ObjectsDeployFailure(message=message, failed_objects=frozenset(body.failed_objects))
    if body.error_type == SdfErrorType.SETTINGS_DEPLOY:
        return SettingsDeployFailure(
            message=message,
            failed_config_types=frozenset(body.failed_config_types),
        )
    log.debug("unrecognized SDF error type: %s", body.error_type)
    return UnclassifiedFailure(message=message)
