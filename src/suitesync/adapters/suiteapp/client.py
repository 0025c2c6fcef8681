"""HTTP client for record-level SuiteApp operations."""

from __future__ import annotations

import asyncio
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from suitesync.adapters.http_resilience import ResilientClient

from .schema import RecordResult, RecordsResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from suitesync.config.account import AccountConfig
    from suitesync.config.http_resilience import ResilienceConfig
    from suitesync.domain.model import InstanceElement

log = getLogger(__name__)


class RecordsOperation(StrEnum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_SDF = "deleteSdf"


class SuiteAppAPIError(RuntimeError):
    """Raised when the SuiteApp rejects or garbles one record operation."""


class SuiteAppClient:
    def __init__(
        self,
        *,
        config: AccountConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def add_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]:
        return asyncio.run(self._run_operation(RecordsOperation.ADD, instances))

    def update_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]:
        return asyncio.run(self._run_operation(RecordsOperation.UPDATE, instances))

    def delete_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]:
        return asyncio.run(self._run_operation(RecordsOperation.DELETE, instances))

    def delete_sdf_instances(self, instances: Sequence[InstanceElement]) -> list[int | Exception]:
        return asyncio.run(self._run_operation(RecordsOperation.DELETE_SDF, instances))

    async def _run_operation(
        self,
        operation: RecordsOperation,
        instances: Sequence[InstanceElement],
    ) -> list[int | Exception]:
        if not instances:
            return []
        body = {
            "records": [
                {"type": instance.type_name, "values": instance.value} for instance in instances
            ]
        }
        async with self._client_factory(self._resilience) as client:
            response = await client.post(f"suiteapp/records/{operation}", json=body)
        response.raise_for_status()

        try:
            results = RecordsResponse.model_validate_json(response.content).results
        except ValidationError as exc:
            raise SuiteAppAPIError(f"Unexpected SuiteApp {operation} response payload") from exc
        if len(results) != len(instances):
            raise SuiteAppAPIError(
                f"SuiteApp {operation} returned {len(results)} results "
                f"for {len(instances)} records"
            )
        log.debug("SuiteApp %s of %d records finished", operation, len(instances))
        return [
            _to_outcome(result, instance)
            for result, instance in zip(results, instances, strict=True)
        ]


def _to_outcome(result: RecordResult, instance: InstanceElement) -> int | Exception:
    if result.internal_id is not None:
        return result.internal_id
    return SuiteAppAPIError(
        f"Failed to deploy {instance.elem_id.full_name}: {result.error or 'unknown error'}"
    )
