"""Domain port definitions for adapters."""

from __future__ import annotations

from .deploy import (
    CustomizationInfo,
    CustomObjectsReader,
    RecordsDeployer,
    ReferenceExtractor,
    Serializer,
    SubmitContext,
    SubmitPayloads,
)

__all__ = [
    "CustomObjectsReader",
    "CustomizationInfo",
    "RecordsDeployer",
    "ReferenceExtractor",
    "Serializer",
    "SubmitContext",
    "SubmitPayloads",
]
