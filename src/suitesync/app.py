"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from suitesync.adapters.sdf import SdfClient, extract_references, to_customization_infos, to_element
from suitesync.adapters.suiteapp import SuiteAppClient
from suitesync.config import AdditionalDependencies, get_account_config
from suitesync.domain.deploy import DeployClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    from suitesync.config import AccountConfig
    from suitesync.domain.deploy import DeployResult
    from suitesync.domain.model import Change, InstanceElement, ObjectType
    from suitesync.domain.ports import CustomObjectsReader

log = getLogger(__name__)


def build_deploy_client(
    config: AccountConfig | None = None,
    *,
    with_suiteapp: bool = True,
) -> DeployClient:
    account = config or get_account_config()
    return DeployClient(
        submit=SdfClient(config=account).deploy,
        serialize=to_customization_infos,
        extract_references=extract_references,
        records=SuiteAppClient(config=account) if with_suiteapp else None,
    )


def deploy_changes(
    changes: Sequence[Change],
    *,
    group_id: str,
    additional_dependencies: AdditionalDependencies | None = None,
    client: DeployClient | None = None,
) -> DeployResult:
    """Deploy one change group and log a summary."""

    effective_client = client or build_deploy_client()
    dependencies = additional_dependencies or AdditionalDependencies()
    log.info("Starting deploy of group %r: changes=%d", group_id, len(changes))

    result = effective_client.deploy(changes, group_id, dependencies)

    log.info(
        "Finished deploy of group %r: applied=%d, errors=%d, dropped=%d",
        group_id,
        len(result.applied_changes),
        len(result.errors),
        len(changes) - len(result.applied_changes),
    )
    for error in result.errors:
        log.warning("Deploy error: %s", error)
    return result


def validate_changes(
    changes: Sequence[Change],
    *,
    group_id: str,
    additional_dependencies: AdditionalDependencies | None = None,
    client: DeployClient | None = None,
) -> tuple[Exception, ...]:
    effective_client = client or build_deploy_client()
    errors = effective_client.validate(
        changes, group_id, additional_dependencies or AdditionalDependencies()
    )
    log.info("Validated group %r: errors=%d", group_id, len(errors))
    return errors


def fetch_custom_objects(
    type_names: Sequence[str],
    *,
    reader: CustomObjectsReader | None = None,
) -> list[InstanceElement | ObjectType]:
    """Read custom objects of the given types into canonical elements."""

    effective_reader = reader or SdfClient(config=get_account_config())
    infos = effective_reader.get_custom_objects(type_names)
    elements = [to_element(info) for info in infos]
    log.info("Fetched %d elements of types %s", len(elements), ", ".join(type_names))
    return elements
