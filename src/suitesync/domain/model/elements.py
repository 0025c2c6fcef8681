"""Canonical element model for account customizations.

Three element shapes exist: custom object instances, custom record types and
fields of custom record types. Every element is addressed by an ``ElemID``;
the account itself addresses objects by their script id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from .enums import IdType

ADAPTER_NAME: Final[str] = "netsuite"
SCRIPT_ID: Final[str] = "scriptid"
APPLICATION_ID: Final[str] = "application_id"
CUSTOM_RECORD_TYPE: Final[str] = "customrecordtype"
CUSTOM_RECORD_FIELDS: Final[str] = "customrecordcustomfields"
CONFIG_FEATURES: Final[str] = "companyfeatures"


@dataclass(frozen=True, slots=True)
class ElemID:
    type_name: str
    name: str
    id_type: IdType = IdType.INSTANCE
    adapter: str = ADAPTER_NAME

    @classmethod
    def for_type(cls, type_name: str, *, adapter: str = ADAPTER_NAME) -> ElemID:
        return cls(type_name=type_name, name=type_name, id_type=IdType.TYPE, adapter=adapter)

    @property
    def full_name(self) -> str:
        if self.id_type is IdType.TYPE:
            return f"{self.adapter}.{self.type_name}"
        return f"{self.adapter}.{self.type_name}.{self.id_type}.{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(eq=False, slots=True)
class InstanceElement:
    elem_id: ElemID
    value: dict[str, Any] = field(default_factory=dict[str, Any])

    @property
    def type_name(self) -> str:
        return self.elem_id.type_name


@dataclass(eq=False, slots=True)
class ObjectType:
    """A custom record type; its definition lives in ``annotations``."""

    elem_id: ElemID
    annotations: dict[str, Any] = field(default_factory=dict[str, Any])

    @property
    def type_name(self) -> str:
        return self.elem_id.type_name


@dataclass(eq=False, slots=True)
class Field:
    parent: ObjectType
    name: str
    annotations: dict[str, Any] = field(default_factory=dict[str, Any])

    @property
    def elem_id(self) -> ElemID:
        return ElemID(
            type_name=self.parent.elem_id.type_name,
            name=self.name,
            id_type=IdType.FIELD,
            adapter=self.parent.elem_id.adapter,
        )

    @property
    def type_name(self) -> str:
        return self.parent.type_name


type Element = InstanceElement | ObjectType | Field


def element_values(element: InstanceElement | ObjectType) -> dict[str, Any]:
    """Return the mapping that carries an element's remote definition."""

    if isinstance(element, InstanceElement):
        return element.value
    return element.annotations


def get_script_id(element: Element) -> str | None:
    if isinstance(element, Field):
        return element.parent.annotations.get(SCRIPT_ID)
    return element_values(element).get(SCRIPT_ID)


def get_application_id(element: Element) -> str | None:
    if isinstance(element, Field):
        return element.parent.annotations.get(APPLICATION_ID)
    return element_values(element).get(APPLICATION_ID)
