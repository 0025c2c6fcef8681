"""Entry point for deploying one change group."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from suitesync.common.logging import logged
from suitesync.domain.model import InstanceElement

from .groups import (
    is_file_cabinet_group_id,
    is_sdf_create_or_update_group_id,
    is_sdf_delete_group_id,
    is_suiteapp_create_records_group_id,
    is_suiteapp_delete_records_group_id,
    is_suiteapp_update_records_group_id,
)
from .loop import run_deploy_loop
from .results import DeployResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from suitesync.config.deploy import AdditionalDependencies
    from suitesync.domain.model import Change
    from suitesync.domain.ports import (
        RecordsDeployer,
        ReferenceExtractor,
        Serializer,
        SubmitPayloads,
    )

log = getLogger(__name__)


class SuiteAppNotConfiguredError(RuntimeError):
    def __init__(self, group_id: str) -> None:
        super().__init__(
            f'SuiteApp is not configured and therefore changes group "{group_id}" '
            "cannot be deployed"
        )


class UnsupportedGroupError(RuntimeError):
    """Raised for groups this connector does not deploy."""


@dataclass(slots=True)
class DeployClient:
    submit: SubmitPayloads
    serialize: Serializer
    extract_references: ReferenceExtractor
    records: RecordsDeployer | None = None

    @logged("client.deploy")
    def deploy(
        self,
        changes: Sequence[Change],
        group_id: str,
        additional_dependencies: AdditionalDependencies,
    ) -> DeployResult:
        if is_sdf_create_or_update_group_id(group_id):
            return run_deploy_loop(
                changes,
                submit=self.submit,
                serialize=self.serialize,
                extract_references=self.extract_references,
                additional_dependencies=additional_dependencies,
            )
        if is_file_cabinet_group_id(group_id):
            return DeployResult(
                errors=[
                    UnsupportedGroupError(
                        f'changes group "{group_id}" must be deployed with the file cabinet sync'
                    )
                ]
            )
        return self._deploy_records(changes, group_id)

    @logged("client.validate")
    def validate(
        self,
        changes: Sequence[Change],
        group_id: str,
        additional_dependencies: AdditionalDependencies,
    ) -> tuple[Exception, ...]:
        if not is_sdf_create_or_update_group_id(group_id):
            return ()
        result = run_deploy_loop(
            changes,
            submit=self.submit,
            serialize=self.serialize,
            extract_references=self.extract_references,
            additional_dependencies=additional_dependencies,
            validate_only=True,
        )
        return tuple(result.errors)

    def _deploy_records(self, changes: Sequence[Change], group_id: str) -> DeployResult:
        relevant_changes: list[Change] = []
        instances: list[InstanceElement] = []
        for change in changes:
            element = change.data
            if isinstance(element, InstanceElement):
                relevant_changes.append(change)
                instances.append(element)
        results = self._run_records_operation(instances, group_id)

        deploy_result = DeployResult()
        for change, outcome in zip(relevant_changes, results, strict=False):
            if isinstance(outcome, Exception):
                deploy_result.errors.append(outcome)
                continue
            deploy_result.applied_changes.append(change)
            deploy_result.elem_id_to_internal_id[change.full_name] = str(outcome)
        # an operation that failed as a whole reports fewer results than instances
        deploy_result.errors.extend(
            outcome
            for outcome in results[len(relevant_changes) :]
            if isinstance(outcome, Exception)
        )
        log.debug(
            "records deploy of group %s: applied=%d, errors=%d",
            group_id,
            len(deploy_result.applied_changes),
            len(deploy_result.errors),
        )
        return deploy_result

    def _run_records_operation(
        self,
        instances: Sequence[InstanceElement],
        group_id: str,
    ) -> list[int | Exception]:
        if self.records is None:
            return [SuiteAppNotConfiguredError(group_id)]
        if is_suiteapp_update_records_group_id(group_id):
            return self.records.update_instances(instances)
        if is_suiteapp_create_records_group_id(group_id):
            return self.records.add_instances(instances)
        if is_suiteapp_delete_records_group_id(group_id):
            return self.records.delete_instances(instances)
        if is_sdf_delete_group_id(group_id):
            return self.records.delete_sdf_instances(instances)
        raise ValueError(f"Cannot deploy group ID: {group_id}")
