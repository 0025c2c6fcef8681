from __future__ import annotations

from typing import TYPE_CHECKING

from suitesync.adapters.sdf import extract_references, to_customization_infos
from suitesync.domain.deploy import DependencyInfo, build_dependency_info
from suitesync.domain.model import SCRIPT_ID, Change, ChangeKind, Field
from tests.helpers.changes import added, instance, modified, record_type, ref

if TYPE_CHECKING:
    from suitesync.domain.model import Element
    from suitesync.domain.ports import CustomizationInfo


def _edges(info: DependencyInfo) -> set[tuple[str, str]]:
    return {
        (source.value.elem_full_name, target.value.elem_full_name)
        for source, target in info.dependency_graph.edges()
    }


def test_reference_to_added_object_creates_edge() -> None:
    record = record_type("customrecord_a")
    script = instance("clientscript", "customscript_b", record=ref("customrecord_a"))

    info = build_dependency_info(
        [added(record), added(script)],
        serialize=to_customization_infos,
        extract_references=extract_references,
    )

    assert _edges(info) == {(record.elem_id.full_name, script.elem_id.full_name)}
    assert info.dependency_map[script.elem_id.full_name] == frozenset({"customrecord_a"})
    assert info.dependency_map[record.elem_id.full_name] == frozenset()


def test_reference_to_modified_object_creates_no_edge() -> None:
    record = record_type("customrecord_a")
    script = instance("clientscript", "customscript_b", record=ref("customrecord_a"))

    info = build_dependency_info(
        [modified(record), added(script)],
        serialize=to_customization_infos,
        extract_references=extract_references,
    )

    assert _edges(info) == set()
    assert info.dependency_map[script.elem_id.full_name] == frozenset({"customrecord_a"})


def test_reference_outside_batch_is_recorded_without_edge() -> None:
    script = instance("clientscript", "customscript_b", list=ref("customlist_missing"))

    info = build_dependency_info(
        [added(script)],
        serialize=to_customization_infos,
        extract_references=extract_references,
    )

    assert _edges(info) == set()
    assert info.dependency_map[script.elem_id.full_name] == frozenset({"customlist_missing"})


def test_nodes_cache_payloads_and_remote_ids() -> None:
    calls: list[str] = []

    def serialize(element: Element) -> tuple[CustomizationInfo, ...]:
        calls.append(element.elem_id.full_name)
        return to_customization_infos(element)

    record = record_type("customrecord_a")
    info = build_dependency_info(
        [added(record)],
        serialize=serialize,
        extract_references=extract_references,
    )

    node = info.dependency_graph.find_by_field(SCRIPT_ID, "customrecord_a")
    assert node is not None
    assert node.value.change_kind is ChangeKind.ADDITION
    assert info.payloads_for(record.elem_id.full_name) == node.value.payloads
    assert calls == [record.elem_id.full_name]


def test_self_reference_adds_no_edge_and_cycles_are_safe() -> None:
    first = instance("customlist", "customlist_a", peer=ref("customlist_b"), me=ref("customlist_a"))
    second = instance("customlist", "customlist_b", peer=ref("customlist_a"))

    info = build_dependency_info(
        [added(first), added(second)],
        serialize=to_customization_infos,
        extract_references=extract_references,
    )

    assert _edges(info) == {
        (first.elem_id.full_name, second.elem_id.full_name),
        (second.elem_id.full_name, first.elem_id.full_name),
    }
    assert info.transitive_dependents([first.elem_id.full_name]) == {
        first.elem_id.full_name,
        second.elem_id.full_name,
    }


def test_removals_and_fields_do_not_become_nodes() -> None:
    record = record_type("customrecord_a")
    field = Field(parent=record, name="custrecord_code")

    info = build_dependency_info(
        [Change.removal(record), added(field)],
        serialize=to_customization_infos,
        extract_references=extract_references,
    )

    assert len(info.dependency_graph) == 1
    node = info.dependency_graph.find_by_key(field.elem_id.full_name)
    assert node is not None
    assert node.value.payloads == ()
    assert info.dependency_graph.find_by_key(record.elem_id.full_name) is None


def test_field_definitions_are_folded_into_record_type_payload() -> None:
    listing = instance("customlist", "customlist_a")
    record = record_type("customrecord_b")
    field = Field(
        parent=record, name="custrecord_kind", annotations={"source": ref("customlist_a")}
    )

    info = build_dependency_info(
        [added(listing), added(record)],
        serialize=to_customization_infos,
        extract_references=extract_references,
        field_changes_by_parent={record.elem_id.full_name: [added(field)]},
    )

    (payload,) = info.payloads_for(record.elem_id.full_name) or ()
    assert payload.values["customrecordcustomfields"] == {
        "custrecord_kind": {"source": "[scriptid=customlist_a]"}
    }
    assert _edges(info) == {(listing.elem_id.full_name, record.elem_id.full_name)}
    assert info.dependency_map[record.elem_id.full_name] == frozenset({"customlist_a"})
