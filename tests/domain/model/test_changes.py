from __future__ import annotations

import pytest

from suitesync.domain.model import (
    Change,
    ChangeKind,
    ElemID,
    Field,
    IdType,
    get_application_id,
    get_script_id,
    is_field_change,
    is_instance_or_type_change,
)
from tests.helpers.changes import instance, record_type


def test_elem_id_full_names() -> None:
    assert ElemID.for_type("customrecord_a").full_name == "netsuite.customrecord_a"
    assert (
        ElemID(type_name="customlist", name="customlist_a").full_name
        == "netsuite.customlist.instance.customlist_a"
    )


def test_field_is_addressed_through_its_parent() -> None:
    record = record_type("customrecord_a", application_id="com.example.app")
    field = Field(parent=record, name="custrecord_code")

    assert field.elem_id.id_type is IdType.FIELD
    assert field.elem_id.full_name == "netsuite.customrecord_a.field.custrecord_code"
    assert get_script_id(field) == "customrecord_a"
    assert get_application_id(field) == "com.example.app"


def test_change_data_prefers_after() -> None:
    before = instance("customlist", "customlist_a", label="old")
    after = instance("customlist", "customlist_a", label="new")

    change = Change.modification(before, after)

    assert change.kind is ChangeKind.MODIFICATION
    assert change.data is after
    assert change.full_name == "netsuite.customlist.instance.customlist_a"
    assert Change.removal(before).data is before


def test_change_validates_its_sides() -> None:
    element = instance("customlist", "customlist_a")

    with pytest.raises(ValueError, match="Addition"):
        Change(kind=ChangeKind.ADDITION, before=element, after=element)
    with pytest.raises(ValueError, match="Removal"):
        Change(kind=ChangeKind.REMOVAL, after=element)
    with pytest.raises(ValueError, match="Modification"):
        Change(kind=ChangeKind.MODIFICATION, after=element)


def test_change_predicates() -> None:
    record = record_type("customrecord_a")
    field_change = Change.addition(Field(parent=record, name="custrecord_code"))

    assert is_field_change(field_change)
    assert not is_instance_or_type_change(field_change)
    assert is_instance_or_type_change(Change.addition(record))
