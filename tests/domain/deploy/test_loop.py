from __future__ import annotations

import pytest

from suitesync.adapters.sdf import extract_references, to_customization_infos
from suitesync.config import AdditionalDependencies, ManifestDependencies
from suitesync.domain.deploy import (
    DeployError,
    DeployLoopState,
    DeployResult,
    FailureKind,
    FeaturesDeployFailure,
    ManifestValidationFailure,
    MissingManifestFeaturesFailure,
    ObjectsDeployFailure,
    Reduction,
    SettingsDeployFailure,
    run_deploy_loop,
)
from suitesync.domain.deploy import loop as loop_module
from suitesync.domain.model import Change, Field
from tests.helpers.changes import (
    ScriptedSubmitter,
    added,
    features_instance,
    instance,
    modified,
    raised,
    record_type,
    ref,
)


def _run(
    changes: list[Change],
    submitter: ScriptedSubmitter,
    *,
    dependencies: AdditionalDependencies | None = None,
    validate_only: bool = False,
) -> DeployResult:
    return run_deploy_loop(
        changes,
        submit=submitter,
        serialize=to_customization_infos,
        extract_references=extract_references,
        additional_dependencies=dependencies or AdditionalDependencies(),
        validate_only=validate_only,
    )


def _assert_applied_subset(result: DeployResult, changes: list[Change]) -> None:
    assert all(any(applied is change for change in changes) for applied in result.applied_changes)


def test_empty_input_returns_empty_result_without_submitting() -> None:
    submitter = ScriptedSubmitter()

    result = _run([], submitter)

    assert result.errors == []
    assert result.applied_changes == []
    assert submitter.calls == []


def test_successful_submission_applies_everything() -> None:
    changes = [
        added(instance("customlist", "customlist_a")),
        modified(instance("customlist", "customlist_b")),
    ]
    submitter = ScriptedSubmitter()

    result = _run(changes, submitter)

    assert result.errors == []
    assert result.applied_changes == changes
    assert result.final_state is DeployLoopState.SUCCEEDED
    assert submitter.calls[0].script_ids == ["customlist_a", "customlist_b"]


def test_objects_failure_drops_failed_object_and_its_dependents() -> None:
    record = added(record_type("customrecord_a"))
    script = added(instance("clientscript", "customscript_b", record=ref("customrecord_a")))
    submitter = ScriptedSubmitter(
        [ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customrecord_a"}))]
    )

    result = _run([record, script], submitter)

    assert result.applied_changes == []
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], DeployError)
    assert result.errors[0].kind is FailureKind.OBJECTS_DEPLOY
    assert result.final_state is DeployLoopState.ABORTED_EMPTY
    assert len(submitter.calls) == 1


def test_objects_failure_resubmits_unrelated_changes() -> None:
    record = added(record_type("customrecord_a"))
    script = added(instance("clientscript", "customscript_b", record=ref("customrecord_a")))
    other = added(instance("customlist", "customlist_c"))
    error = raised(
        ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customrecord_a"}))
    )
    submitter = ScriptedSubmitter([error])

    result = _run([record, script, other], submitter)

    assert result.applied_changes == [other]
    assert result.errors == [error]
    assert submitter.calls[1].script_ids == ["customlist_c"]
    _assert_applied_subset(result, [record, script, other])


def test_manifest_failure_without_matching_elements_drops_whole_batch() -> None:
    changes = [
        added(instance("customlist", "customlist_a")),
        added(instance("customlist", "customlist_b")),
    ]
    submitter = ScriptedSubmitter(
        [
            ManifestValidationFailure(
                message="missing", missing_dependency_script_ids=("customlist_unknown",)
            )
        ]
    )

    result = _run(changes, submitter)

    assert result.applied_changes == []
    assert len(result.errors) == 1
    assert len(submitter.calls) == 1


def test_manifest_failure_drops_elements_referencing_missing_objects() -> None:
    broken = added(instance("clientscript", "customscript_a", list=ref("customlist_missing")))
    other = added(instance("customlist", "customlist_b"))
    submitter = ScriptedSubmitter(
        [
            ManifestValidationFailure(
                message="missing", missing_dependency_script_ids=("customlist_missing",)
            )
        ]
    )

    result = _run([broken, other], submitter)

    assert result.applied_changes == [other]
    assert len(result.errors) == 1
    assert result.final_state is DeployLoopState.SUCCEEDED


def test_missing_features_retry_with_extended_manifest() -> None:
    change = added(instance("customlist", "customlist_a"))
    dependencies = AdditionalDependencies()
    submitter = ScriptedSubmitter(
        [MissingManifestFeaturesFailure(message="missing", missing_features=("MULTICURRENCY",))]
    )

    result = _run([change], submitter, dependencies=dependencies)

    assert result.errors == []
    assert result.applied_changes == [change]
    assert [call.features for call in submitter.calls] == [[], ["MULTICURRENCY"]]
    assert dependencies.include.features == ["MULTICURRENCY"]


def test_missing_features_already_included_abort_with_error() -> None:
    change = added(instance("customlist", "customlist_a"))
    dependencies = AdditionalDependencies(include=ManifestDependencies(features=["MULTICURRENCY"]))
    submitter = ScriptedSubmitter(
        [MissingManifestFeaturesFailure(message="missing", missing_features=("MULTICURRENCY",))]
    )

    result = _run([change], submitter, dependencies=dependencies)

    assert result.applied_changes == []
    assert len(result.errors) == 1
    assert result.final_state is DeployLoopState.ABORTED_EMPTY
    assert len(submitter.calls) == 1


def test_features_failure_finishes_with_partial_result() -> None:
    features = Change.modification(
        features_instance(ADVANCEDPRINTING="ENABLED", SUBSIDIARIES="ENABLED"),
        features_instance(ADVANCEDPRINTING="ENABLED"),
    )
    other = added(instance("customlist", "customlist_a"))
    submitter = ScriptedSubmitter(
        [FeaturesDeployFailure(message="partial", excluded_feature_ids=frozenset({"SUBSIDIARIES"}))]
    )

    result = _run([features, other], submitter)

    assert result.applied_changes == [features, other]
    assert len(result.errors) == 1
    assert result.final_state is DeployLoopState.ABORTED_WITH_PARTIAL
    assert len(submitter.calls) == 1


def test_settings_failure_drops_config_changes() -> None:
    features = Change.modification(
        features_instance(ADVANCEDPRINTING="DISABLED"),
        features_instance(ADVANCEDPRINTING="ENABLED"),
    )
    other = added(instance("customlist", "customlist_a"))
    submitter = ScriptedSubmitter(
        [
            SettingsDeployFailure(
                message="failed", failed_config_types=frozenset({"companyfeatures"})
            )
        ]
    )

    result = _run([features, other], submitter)

    assert result.applied_changes == [other]
    assert len(result.errors) == 1


def test_settings_failure_without_matching_changes_aborts() -> None:
    change = added(instance("customlist", "customlist_a"))
    submitter = ScriptedSubmitter(
        [
            SettingsDeployFailure(
                message="failed", failed_config_types=frozenset({"accountingprefs"})
            )
        ]
    )

    result = _run([change], submitter)

    assert result.applied_changes == []
    assert len(result.errors) == 1
    assert result.final_state is DeployLoopState.ABORTED_EMPTY


def test_unexpected_exception_aborts_and_is_reported() -> None:
    change = added(instance("customlist", "customlist_a"))
    error = RuntimeError("connection reset")
    submitter = ScriptedSubmitter([error])

    result = _run([change], submitter)

    assert result.errors == [error]
    assert result.applied_changes == []
    assert len(submitter.calls) == 1


def test_cancellation_is_not_classified() -> None:
    submitter = ScriptedSubmitter([KeyboardInterrupt()])

    with pytest.raises(KeyboardInterrupt):
        _run([added(instance("customlist", "customlist_a"))], submitter)


def test_field_changes_follow_their_record_type() -> None:
    record = record_type("customrecord_a")
    record_change = added(record)
    field_change = added(Field(parent=record, name="custrecord_code"))
    submitter = ScriptedSubmitter()

    result = _run([field_change, record_change], submitter)

    assert result.applied_changes == [record_change, field_change]
    assert submitter.calls[0].script_ids == ["customrecord_a"]


def test_field_changes_of_dropped_record_type_are_dropped() -> None:
    record = record_type("customrecord_a")
    record_change = added(record)
    field_change = added(Field(parent=record, name="custrecord_code"))
    other = added(instance("customlist", "customlist_b"))
    submitter = ScriptedSubmitter(
        [ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customrecord_a"}))]
    )

    result = _run([record_change, field_change, other], submitter)

    assert result.applied_changes == [other]


def test_context_carries_validate_only_and_application_id() -> None:
    change = added(instance("customlist", "customlist_a", application_id="com.example.app"))
    submitter = ScriptedSubmitter()

    _run([change], submitter, validate_only=True)

    assert submitter.calls[0].validate_only
    assert submitter.calls[0].suite_app_id == "com.example.app"


def test_field_definitions_are_submitted_inside_record_type() -> None:
    record = record_type("customrecord_a")
    record_change = modified(record)
    field_change = Change.modification(
        Field(parent=record, name="custrecord_code", annotations={"label": "Old"}),
        Field(parent=record, name="custrecord_code", annotations={"label": "New"}),
    )
    submitter = ScriptedSubmitter()

    result = _run([record_change, field_change], submitter)

    (payload,) = submitter.calls[0].payloads
    assert payload.values["customrecordcustomfields"] == {"custrecord_code": {"label": "New"}}
    assert "customrecordcustomfields" not in record.annotations
    assert result.applied_changes == [record_change, field_change]


def test_field_definitions_survive_resubmission() -> None:
    record = record_type("customrecord_a")
    record_change = added(record)
    field_change = added(Field(parent=record, name="custrecord_code", annotations={"label": "A"}))
    other = added(instance("customlist", "customlist_b"))
    submitter = ScriptedSubmitter(
        [ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customlist_b"}))]
    )

    result = _run([record_change, field_change, other], submitter)

    (payload,) = submitter.calls[1].payloads
    assert payload.values["customrecordcustomfields"] == {"custrecord_code": {"label": "A"}}
    assert result.applied_changes == [record_change, field_change]


def test_field_removals_are_not_reported_as_applied() -> None:
    record = record_type("customrecord_a")
    record_change = modified(record)
    removal = Change.removal(Field(parent=record, name="custrecord_code"))
    submitter = ScriptedSubmitter()

    result = _run([record_change, removal], submitter)

    assert result.applied_changes == [record_change]
    assert "customrecordcustomfields" not in submitter.calls[0].payloads[0].values


def test_batch_keeps_shrinking_across_different_failures() -> None:
    record = added(record_type("customrecord_a"))
    listing = added(instance("customlist", "customlist_b"))
    features = Change.modification(
        features_instance(ADVANCEDPRINTING="DISABLED"),
        features_instance(ADVANCEDPRINTING="ENABLED"),
    )
    submitter = ScriptedSubmitter(
        [
            ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customrecord_a"})),
            SettingsDeployFailure(
                message="failed", failed_config_types=frozenset({"companyfeatures"})
            ),
        ]
    )

    result = _run([record, listing, features], submitter)

    first, second, third = (set(call.script_ids) for call in submitter.calls)
    assert first == {"customrecord_a", "customlist_b", None}
    assert second < first
    assert third < second
    assert all("customrecord_a" not in call.script_ids for call in submitter.calls[1:])
    assert third == {"customlist_b"}
    assert result.applied_changes == [listing]
    assert [error.kind for error in result.errors if isinstance(error, DeployError)] == [
        FailureKind.OBJECTS_DEPLOY,
        FailureKind.SETTINGS_DEPLOY,
    ]
    assert len(result.errors) == 2
    assert result.final_state is DeployLoopState.SUCCEEDED


def test_reduction_removing_nothing_stops_the_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    def remove_nothing(*_args: object, **_kwargs: object) -> Reduction:
        return Reduction.remove(["netsuite.customlist.instance.not_in_batch"])

    monkeypatch.setattr(loop_module, "reduce_batch", remove_nothing)
    submitter = ScriptedSubmitter(
        [ObjectsDeployFailure(message="failed", failed_objects=frozenset({"customlist_a"}))]
    )

    result = _run([added(instance("customlist", "customlist_a"))], submitter)

    assert result.applied_changes == []
    assert len(result.errors) == 1
    assert result.final_state is DeployLoopState.ABORTED_EMPTY
    assert len(submitter.calls) == 1
