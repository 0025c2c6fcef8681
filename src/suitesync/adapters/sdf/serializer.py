"""Serialize elements into customization payloads."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from suitesync.domain.model import (
    CUSTOM_RECORD_TYPE,
    SCRIPT_ID,
    Field,
    InstanceElement,
    ObjectType,
)
from suitesync.domain.ports import CustomizationInfo

if TYPE_CHECKING:
    from suitesync.domain.model import Element


def to_customization_info(element: InstanceElement | ObjectType) -> CustomizationInfo:
    if isinstance(element, InstanceElement):
        values = copy.deepcopy(element.value)
        return CustomizationInfo(
            type_name=element.type_name,
            values=values,
            script_id=values.get(SCRIPT_ID),
        )
    values = copy.deepcopy(element.annotations)
    return CustomizationInfo(
        type_name=CUSTOM_RECORD_TYPE,
        values=values,
        script_id=values.get(SCRIPT_ID),
    )


def to_customization_infos(element: Element) -> tuple[CustomizationInfo, ...]:
    """Serialize one element; field definitions are folded into their record type's payload."""

    if isinstance(element, Field):
        return ()
    return (to_customization_info(element),)
