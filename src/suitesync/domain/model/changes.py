"""Proposed mutations of single elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .elements import Field, InstanceElement, ObjectType
from .enums import ChangeKind

if TYPE_CHECKING:
    from .elements import Element


@dataclass(frozen=True, slots=True, eq=False)
class Change:
    """One addition, modification or removal of an element.

    ``before`` is ``None`` for additions and ``after`` is ``None`` for removals.
    """

    kind: ChangeKind
    before: Element | None = None
    after: Element | None = None

    def __post_init__(self) -> None:
        if self.kind is ChangeKind.ADDITION and (self.before is not None or self.after is None):
            raise ValueError("Addition change must only carry an 'after' element")
        if self.kind is ChangeKind.REMOVAL and (self.after is not None or self.before is None):
            raise ValueError("Removal change must only carry a 'before' element")
        if self.kind is ChangeKind.MODIFICATION and (self.before is None or self.after is None):
            raise ValueError("Modification change must carry both 'before' and 'after'")

    @classmethod
    def addition(cls, after: Element) -> Change:
        return cls(kind=ChangeKind.ADDITION, after=after)

    @classmethod
    def modification(cls, before: Element, after: Element) -> Change:
        return cls(kind=ChangeKind.MODIFICATION, before=before, after=after)

    @classmethod
    def removal(cls, before: Element) -> Change:
        return cls(kind=ChangeKind.REMOVAL, before=before)

    @property
    def data(self) -> Element:
        element = self.after if self.after is not None else self.before
        if element is None:
            raise ValueError("Change carries no element")
        return element

    @property
    def full_name(self) -> str:
        return self.data.elem_id.full_name

    @property
    def type_name(self) -> str:
        return self.data.type_name


def is_field_change(change: Change) -> bool:
    return isinstance(change.data, Field)


def is_instance_or_type_change(change: Change) -> bool:
    return isinstance(change.data, InstanceElement | ObjectType)


def is_addition_or_modification(change: Change) -> bool:
    return change.kind in {ChangeKind.ADDITION, ChangeKind.MODIFICATION}
