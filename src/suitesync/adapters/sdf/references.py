"""Cross-object references embedded in serialized values.

Objects point at each other with bracketed service ids, e.g.
``[scriptid=customrecord_vendor]``, ``[type=transactionbodycustomfield,
scriptid=custbody_ref]`` or ``[scriptid=customrecord_vendor.custrecord_code]``
for a nested object.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from suitesync.domain.ports import CustomizationInfo

SERVICE_ID_PATTERN = re.compile(
    r"\[(?:(?:appid|bundleid|type)=[\w.]+,\s*)*"
    r"scriptid=(?P<scriptid>[a-z0-9_]+(?:\.[a-z0-9_]+)*)\]",
    re.IGNORECASE,
)


def capture_service_ids(text: str) -> list[str]:
    """Return referenced script ids in order of appearance.

    A nested reference yields the full dotted id followed by its top-level object.
    """

    found: list[str] = []
    for match in SERVICE_ID_PATTERN.finditer(text):
        script_id = match.group("scriptid")
        candidates = [script_id]
        top_level = script_id.split(".", 1)[0]
        if top_level != script_id:
            candidates.append(top_level)
        found.extend(candidate for candidate in candidates if candidate not in found)
    return found


def extract_references(payload: CustomizationInfo) -> tuple[str, ...]:
    references: list[str] = []
    for text in _iter_strings(payload.values):
        references.extend(
            script_id for script_id in capture_service_ids(text) if script_id not in references
        )
    return tuple(references)


def _iter_strings(value: object) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for nested in value.values():  # pyright: ignore[reportUnknownVariableType]
            yield from _iter_strings(nested)
    elif isinstance(value, list | tuple):
        for nested in value:  # pyright: ignore[reportUnknownVariableType]
            yield from _iter_strings(nested)
