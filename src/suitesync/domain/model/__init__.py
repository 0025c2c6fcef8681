"""Canonical element and change model."""

from __future__ import annotations

from .changes import (
    Change,
    is_addition_or_modification,
    is_field_change,
    is_instance_or_type_change,
)
from .elements import (
    ADAPTER_NAME,
    APPLICATION_ID,
    CONFIG_FEATURES,
    CUSTOM_RECORD_FIELDS,
    CUSTOM_RECORD_TYPE,
    SCRIPT_ID,
    Element,
    ElemID,
    Field,
    InstanceElement,
    ObjectType,
    element_values,
    get_application_id,
    get_script_id,
)
from .enums import ChangeKind, IdType

__all__ = [
    "ADAPTER_NAME",
    "APPLICATION_ID",
    "CONFIG_FEATURES",
    "CUSTOM_RECORD_FIELDS",
    "CUSTOM_RECORD_TYPE",
    "SCRIPT_ID",
    "Change",
    "ChangeKind",
    "ElemID",
    "Element",
    "Field",
    "IdType",
    "InstanceElement",
    "ObjectType",
    "element_values",
    "get_application_id",
    "get_script_id",
    "is_addition_or_modification",
    "is_field_change",
    "is_instance_or_type_change",
]
