from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from suitesync.app import deploy_changes, fetch_custom_objects, validate_changes
from suitesync.config import AdditionalDependencies, ManifestDependencies, configure_logging
from suitesync.domain.model import InstanceElement, element_values

from .change_file import load_changes

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from suitesync.domain.model import ObjectType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch and deploy account customizations")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output, including every deploy attempt",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Fetch custom objects as JSON")
    fetch.add_argument(
        "--type",
        dest="types",
        action="append",
        required=True,
        help="Custom object type to fetch (repeatable)",
    )

    deploy = subparsers.add_parser("deploy", help="Deploy a change file as one group")
    deploy.add_argument(
        "--changes",
        type=Path,
        required=True,
        help="Path to a JSON change file",
    )
    deploy.add_argument(
        "--group-id",
        type=str,
        default="SDF - create or update",
        help="Deploy group id (default: %(default)s)",
    )
    deploy.add_argument(
        "--include-feature",
        dest="include_features",
        action="append",
        default=[],
        help="Feature to declare in the deploy manifest (repeatable)",
    )
    deploy.add_argument(
        "--validate-only",
        action="store_true",
        help="Ask the account to validate the changes without applying them",
    )

    return parser.parse_args(list(argv))


def _element_to_json(element: InstanceElement | ObjectType) -> dict[str, object]:
    return {
        "elemID": element.elem_id.full_name,
        "kind": "instance" if isinstance(element, InstanceElement) else "type",
        "values": element_values(element),
    }


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        changes = load_changes(parsed_args.changes) if parsed_args.command == "deploy" else []
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "fetch":
            elements = fetch_custom_objects(parsed_args.types)
            json.dump([_element_to_json(element) for element in elements], sys.stdout, indent=2)
            sys.stdout.write("\n")
        elif parsed_args.command == "deploy":
            dependencies = AdditionalDependencies(
                include=ManifestDependencies(features=list(parsed_args.include_features))
            )
            if parsed_args.validate_only:
                errors = validate_changes(
                    changes,
                    group_id=parsed_args.group_id,
                    additional_dependencies=dependencies,
                )
            else:
                errors = deploy_changes(
                    changes,
                    group_id=parsed_args.group_id,
                    additional_dependencies=dependencies,
                ).errors
            if errors:
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
