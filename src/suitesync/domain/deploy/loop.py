"""Deploy loop for SDF create/update groups.

The loop submits the whole batch, and on a typed failure asks the reducer how
to continue. The dependency information is built once from the full batch;
later iterations only drop changes from the working batch, so a dropped change
is never submitted again.
"""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

from suitesync.common.logging import log_time
from suitesync.domain.model import (
    Field,
    get_application_id,
    is_addition_or_modification,
    is_field_change,
    is_instance_or_type_change,
)
from suitesync.domain.ports import SubmitContext

from .dependencies import build_dependency_info
from .failures import DeployError, SubmissionSucceeded, classify_failure
from .reducer import ReductionAction, reduce_batch
from .results import DeployLoopState, DeployResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from suitesync.config.deploy import AdditionalDependencies
    from suitesync.domain.model import Change
    from suitesync.domain.ports import (
        CustomizationInfo,
        ReferenceExtractor,
        Serializer,
        SubmitPayloads,
    )

    from .dependencies import DependencyInfo
    from .failures import SubmissionOutcome

log = getLogger(__name__)


def run_deploy_loop(
    changes: Sequence[Change],
    *,
    submit: SubmitPayloads,
    serialize: Serializer,
    extract_references: ReferenceExtractor,
    additional_dependencies: AdditionalDependencies,
    validate_only: bool = False,
) -> DeployResult:
    """Deploy ``changes`` as one group, dropping failed changes until the rest succeed.

    ``additional_dependencies.include.features`` is extended in place when the
    account reports missing manifest features.
    """

    if not changes:
        return DeployResult()

    batch = [change for change in changes if is_instance_or_type_change(change)]
    field_changes_by_parent = _field_changes_by_parent(changes)
    context = SubmitContext(
        suite_app_id=get_application_id(changes[0].data),
        additional_dependencies=additional_dependencies,
        validate_only=validate_only,
    )
    dependency_info = build_dependency_info(
        batch,
        serialize=serialize,
        extract_references=extract_references,
        field_changes_by_parent=field_changes_by_parent,
    )

    errors: list[Exception] = []
    state = _enter(DeployLoopState.SUBMITTING)
    while batch:
        payloads = _batch_payloads(batch, dependency_info, serialize)
        log.debug("deploying %d changes", len(batch))
        outcome, error = _submit(submit, payloads, context)
        if isinstance(outcome, SubmissionSucceeded):
            state = _enter(DeployLoopState.SUCCEEDED)
            return DeployResult(
                errors=errors,
                applied_changes=_with_field_changes(batch, field_changes_by_parent),
                final_state=state,
            )

        errors.append(error or DeployError(outcome))
        state = _enter(DeployLoopState.REDUCING_AFTER_FAILURE)
        reduction = reduce_batch(
            outcome,
            batch,
            dependency_info=dependency_info,
            additional_dependencies=additional_dependencies,
        )

        if reduction.action is ReductionAction.ABORT:
            state = _enter(DeployLoopState.ABORTED_EMPTY)
            return DeployResult(errors=errors, final_state=state)
        if reduction.action is ReductionAction.FINISH:
            state = _enter(DeployLoopState.ABORTED_WITH_PARTIAL)
            return DeployResult(
                errors=errors,
                applied_changes=_with_field_changes(reduction.applied, field_changes_by_parent),
                final_state=state,
            )
        if reduction.action is ReductionAction.RETRY:
            if reduction.discard_error:
                # not a change error once the manifest declares the features
                errors.pop()
        else:
            remaining = [change for change in batch if change.full_name not in reduction.to_remove]
            if len(remaining) == len(batch):
                log.warning("failure %s removed no changes, stopping", outcome.kind)
                state = _enter(DeployLoopState.ABORTED_EMPTY)
                return DeployResult(errors=errors, final_state=state)
            log.debug("removed %d changes from the batch", len(batch) - len(remaining))
            batch = remaining
        state = _enter(DeployLoopState.SUBMITTING)

    return DeployResult(errors=errors, final_state=_enter(DeployLoopState.ABORTED_EMPTY))


def _enter(state: DeployLoopState) -> DeployLoopState:
    log.debug("deploy loop state: %s", state)
    return state


def _submit(
    submit: SubmitPayloads,
    payloads: Sequence[CustomizationInfo],
    context: SubmitContext,
) -> tuple[SubmissionOutcome, Exception | None]:
    try:
        return log_time(lambda: submit(payloads, context), "sdfDeploy"), None
    except Exception as exc:  # noqa: BLE001
        log.debug("submission raised %s", type(exc).__name__)
        return classify_failure(exc), exc


def _batch_payloads(
    batch: Iterable[Change],
    dependency_info: DependencyInfo,
    serialize: Serializer,
) -> list[CustomizationInfo]:
    payloads: list[CustomizationInfo] = []
    for change in batch:
        cached = dependency_info.payloads_for(change.full_name)
        payloads.extend(cached if cached is not None else serialize(change.data))
    return payloads


def _field_changes_by_parent(changes: Iterable[Change]) -> dict[str, list[Change]]:
    by_parent: defaultdict[str, list[Change]] = defaultdict(list)
    for change in changes:
        element = change.data
        if not (is_field_change(change) and isinstance(element, Field)):
            continue
        if not is_addition_or_modification(change):
            log.warning(
                "field removal %s cannot be deployed with its record type", change.full_name
            )
            continue
        by_parent[element.parent.elem_id.full_name].append(change)
    return dict(by_parent)


def _with_field_changes(
    changes: Iterable[Change],
    field_changes_by_parent: Mapping[str, list[Change]],
) -> list[Change]:
    applied: list[Change] = []
    for change in changes:
        applied.append(change)
        applied.extend(field_changes_by_parent.get(change.full_name, ()))
    return applied
