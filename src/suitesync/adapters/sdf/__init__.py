"""SDF deploy adapter."""

from __future__ import annotations

from .client import SdfAPIError, SdfClient, build_manifest, to_submission_outcome
from .references import capture_service_ids, extract_references
from .serializer import to_customization_infos
from .translator import to_element

__all__ = [
    "SdfAPIError",
    "SdfClient",
    "build_manifest",
    "capture_service_ids",
    "extract_references",
    "to_customization_infos",
    "to_element",
    "to_submission_outcome",
]
