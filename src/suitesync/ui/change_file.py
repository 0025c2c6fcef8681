"""JSON change files consumed by the CLI.

Example::

    {
      "changes": [
        {"action": "add", "after": {"type": "customlist", "values": {"scriptid": "customlist_a"}}},
        {"action": "remove",
         "before": {"kind": "type", "type": "customrecord_b", "values": {"label": "B"}}}
      ]
    }
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from suitesync.domain.model import (
    SCRIPT_ID,
    Change,
    ElemID,
    InstanceElement,
    ObjectType,
)


class ChangeAction(StrEnum):
    ADD = "add"
    MODIFY = "modify"
    REMOVE = "remove"


class ElementSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["instance", "type"] = "instance"
    type: str
    name: str | None = None
    values: dict[str, Any] = Field(default_factory=dict[str, Any])

    def to_element(self) -> InstanceElement | ObjectType:
        if self.kind == "type":
            return ObjectType(elem_id=ElemID.for_type(self.type), annotations=dict(self.values))
        name = self.name or self.values.get(SCRIPT_ID)
        if not name:
            raise ValueError(f"{self.type} instance needs a name or a scriptid")
        return InstanceElement(
            elem_id=ElemID(type_name=self.type, name=name),
            value=dict(self.values),
        )


class ChangeSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    action: ChangeAction
    before: ElementSpec | None = None
    after: ElementSpec | None = None

    @model_validator(mode="after")
    def _check_sides(self) -> ChangeSpec:
        needs_before = self.action in {ChangeAction.MODIFY, ChangeAction.REMOVE}
        needs_after = self.action in {ChangeAction.ADD, ChangeAction.MODIFY}
        if needs_before != (self.before is not None) or needs_after != (self.after is not None):
            raise ValueError(f"'{self.action}' change has the wrong before/after elements")
        return self

    def to_change(self) -> Change:
        if self.action is ChangeAction.ADD and self.after is not None:
            return Change.addition(self.after.to_element())
        if self.action is ChangeAction.REMOVE and self.before is not None:
            return Change.removal(self.before.to_element())
        if self.before is None or self.after is None:
            raise ValueError(f"'{self.action}' change has the wrong before/after elements")
        return Change.modification(self.before.to_element(), self.after.to_element())


class ChangeFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    changes: list[ChangeSpec] = Field(default_factory=list["ChangeSpec"])


def load_changes(path: Path) -> list[Change]:
    document = ChangeFile.model_validate_json(Path(path).read_text(encoding="utf-8"))
    return [spec.to_change() for spec in document.changes]
