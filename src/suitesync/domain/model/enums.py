"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ChangeKind(StrEnum):
    ADDITION = "addition"
    MODIFICATION = "modification"
    REMOVAL = "removal"


class IdType(StrEnum):
    INSTANCE = "instance"
    TYPE = "type"
    FIELD = "field"
