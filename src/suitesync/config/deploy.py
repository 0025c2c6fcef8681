"""Deploy manifest configuration.

The include/exclude lists feed the manifest sent with every SDF deploy. The
lists are deliberately mutable: the deploy loop appends features reported as
missing by the account and retries with the extended manifest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True)
class ManifestDependencies:
    features: list[str] = field(default_factory=list[str])
    objects: list[str] = field(default_factory=list[str])
    files: list[str] = field(default_factory=list[str])

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> ManifestDependencies:
        if raw is None:
            return cls()
        return cls(
            features=_string_list(raw, "features"),
            objects=_string_list(raw, "objects"),
            files=_string_list(raw, "files"),
        )


@dataclass(slots=True)
class AdditionalDependencies:
    """Manifest entries added on top of what the deployed objects declare."""

    include: ManifestDependencies = field(default_factory=ManifestDependencies)
    exclude: ManifestDependencies = field(default_factory=ManifestDependencies)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> AdditionalDependencies:
        if raw is None:
            return cls()
        return cls(
            include=ManifestDependencies.from_mapping(_section(raw, "include")),
            exclude=ManifestDependencies.from_mapping(_section(raw, "exclude")),
        )


def _section(raw: Mapping[str, object], key: str) -> Mapping[str, object] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigurationError(f"additional dependencies '{key}' must be a mapping")
    return cast("Mapping[str, object]", value)


def _string_list(raw: Mapping[str, object], key: str) -> list[str]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"additional dependencies '{key}' must be a list of strings")
    return list(cast("list[str]", value))
