"""Response schemas of the SuiteApp records service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RecordResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    internal_id: int | None = Field(default=None, alias="internalId")
    error: str | None = None


class RecordsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[RecordResult] = Field(default_factory=list["RecordResult"])
