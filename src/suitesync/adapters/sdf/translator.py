"""Translate fetched custom objects into domain elements."""

from __future__ import annotations

from typing import TYPE_CHECKING

from suitesync.domain.model import (
    CUSTOM_RECORD_TYPE,
    SCRIPT_ID,
    ElemID,
    InstanceElement,
    ObjectType,
)
from suitesync.domain.ports import CustomizationInfo

if TYPE_CHECKING:
    from .schema import CustomObjectPayload


def to_customization_info(payload: CustomObjectPayload) -> CustomizationInfo:
    values = dict(payload.values)
    values.setdefault(SCRIPT_ID, payload.scriptid)
    return CustomizationInfo(type_name=payload.type, values=values, script_id=payload.scriptid)


def to_element(info: CustomizationInfo) -> InstanceElement | ObjectType:
    """Build the canonical element for one fetched object.

    Custom record types become types; everything else becomes an instance
    named by its script id.
    """

    script_id = info.script_id or info.values.get(SCRIPT_ID)
    if not script_id:
        raise ValueError(f"Fetched {info.type_name} object has no scriptid")
    if info.type_name == CUSTOM_RECORD_TYPE:
        return ObjectType(elem_id=ElemID.for_type(script_id), annotations=dict(info.values))
    return InstanceElement(
        elem_id=ElemID(type_name=info.type_name, name=script_id),
        value=dict(info.values),
    )
