"""Response schemas of the SDF deploy service."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

log = logging.getLogger(__name__)


class SdfBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "SDF %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class SdfErrorType(StrEnum):
    MANIFEST_VALIDATION = "manifestValidation"
    MISSING_MANIFEST_FEATURES = "missingManifestFeatures"
    FEATURES_DEPLOY = "featuresDeploy"
    OBJECTS_DEPLOY = "objectsDeploy"
    SETTINGS_DEPLOY = "settingsDeploy"


class DeploySuccess(SdfBaseModel):
    status: Literal["success"]
    message: str = ""


class DeployFailureBody(SdfBaseModel):
    status: Literal["error"]
    error_type: str | None = Field(default=None, alias="errorType")
    message: str = ""
    missing_dependency_script_ids: list[str] = Field(
        default_factory=list[str], alias="missingDependencyScriptIds"
    )
    missing_features: list[str] = Field(default_factory=list[str], alias="missingFeatures")
    excluded_feature_ids: list[str] = Field(
        default_factory=list[str], alias="excludedFeatureIds"
    )
    failed_objects: list[str] = Field(default_factory=list[str], alias="failedObjects")
    failed_config_types: list[str] = Field(default_factory=list[str], alias="failedConfigTypes")


DEPLOY_RESPONSE_ADAPTER: TypeAdapter[DeploySuccess | DeployFailureBody] = TypeAdapter(
    Annotated[DeploySuccess | DeployFailureBody, Field(discriminator="status")]
)


class CustomObjectPayload(SdfBaseModel):
    type: str
    scriptid: str
    values: dict[str, Any] = Field(default_factory=dict[str, Any])


class CustomObjectsResponse(SdfBaseModel):
    objects: list[CustomObjectPayload] = Field(default_factory=list["CustomObjectPayload"])
