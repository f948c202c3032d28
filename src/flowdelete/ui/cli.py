from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from flowdelete import __version__
from flowdelete.app import reconcile_manifests
from flowdelete.config import (
    ConfigurationError,
    configure_logging,
    get_project_config,
    get_salesforce_cli_config,
)
from flowdelete.config.project import DEFAULT_DEFINITIONS_DIR

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="flowdelete",
        description=(
            "Deactivate the flows listed in a destructive manifest, deploy their "
            "flow definitions and qualify the deletions with remote version numbers"
        ),
    )
    parser.add_argument(
        "-x",
        "--manifest",
        type=Path,
        required=True,
        help="Package manifest (package.xml) that will be deployed",
    )
    parser.add_argument(
        "-d",
        "--destructive-manifest",
        type=Path,
        required=True,
        help="Destructive changes manifest (destructiveChanges.xml) listing deletions",
    )
    parser.add_argument(
        "--definitions-dir",
        type=Path,
        help=f"Directory holding flow definition files (default: {DEFAULT_DEFINITIONS_DIR})",
    )
    parser.add_argument(
        "--target-org",
        type=str,
        help="Org alias or username passed to the sf CLI (defaults to the CLI's default org)",
    )
    parser.add_argument(
        "--retrieve-definitions",
        action="store_true",
        help="Retrieve existing flow definitions from the org before deactivating them",
    )
    parser.add_argument(
        "--query-timeout",
        type=float,
        help="Seconds to wait for the flow version query (defaults to config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(list(argv))


def _require_file(path: Path, option: str) -> Path:
    if not path.is_file():
        raise ConfigurationError(f"{option} {path} does not exist or is not a file")
    return path


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        package_path = _require_file(parsed_args.manifest, "--manifest")
        destructive_path = _require_file(parsed_args.destructive_manifest, "--destructive-manifest")
        project = get_project_config(definitions_dir=parsed_args.definitions_dir)
        salesforce = get_salesforce_cli_config(
            target_org=parsed_args.target_org,
            query_timeout_seconds=parsed_args.query_timeout,
        )
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)

    try:
        reconcile_manifests(
            package_path,
            destructive_path,
            project=project,
            salesforce=salesforce,
            retrieve_definitions=parsed_args.retrieve_definitions,
        )
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Flow deletion reconciliation failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
