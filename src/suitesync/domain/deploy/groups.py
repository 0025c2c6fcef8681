"""Deploy group identifiers.

Group ids may carry a numeric suffix (``SDF - create or update - 2``) when a
change set is split into several groups of the same kind.
"""

from __future__ import annotations

from enum import StrEnum


class DeployGroup(StrEnum):
    SDF_CREATE_OR_UPDATE = "SDF - create or update"
    SDF_DELETE = "SDF - delete"
    SUITEAPP_CREATE_RECORDS = "SuiteApp - create records"
    SUITEAPP_UPDATE_RECORDS = "SuiteApp - update records"
    SUITEAPP_DELETE_RECORDS = "SuiteApp - delete records"
    SUITEAPP_CREATING_FILES = "SuiteApp - creating files"
    SUITEAPP_UPDATING_FILES = "SuiteApp - updating files"
    SUITEAPP_DELETING_FILES = "SuiteApp - deleting files"


FILE_CABINET_GROUPS = frozenset(
    {
        DeployGroup.SUITEAPP_CREATING_FILES,
        DeployGroup.SUITEAPP_UPDATING_FILES,
        DeployGroup.SUITEAPP_DELETING_FILES,
    }
)


def _matches(group_id: str, group: DeployGroup) -> bool:
    return group_id == group or group_id.startswith(f"{group} - ")


def is_sdf_create_or_update_group_id(group_id: str) -> bool:
    return _matches(group_id, DeployGroup.SDF_CREATE_OR_UPDATE)


def is_sdf_delete_group_id(group_id: str) -> bool:
    return _matches(group_id, DeployGroup.SDF_DELETE)


def is_suiteapp_create_records_group_id(group_id: str) -> bool:
    return _matches(group_id, DeployGroup.SUITEAPP_CREATE_RECORDS)


def is_suiteapp_update_records_group_id(group_id: str) -> bool:
    return _matches(group_id, DeployGroup.SUITEAPP_UPDATE_RECORDS)


def is_suiteapp_delete_records_group_id(group_id: str) -> bool:
    return _matches(group_id, DeployGroup.SUITEAPP_DELETE_RECORDS)


def is_file_cabinet_group_id(group_id: str) -> bool:
    return any(_matches(group_id, group) for group in FILE_CABINET_GROUPS)
