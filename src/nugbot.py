"""nugbot - NuGet dependency update checker

    Reads a manifest, asks the NuGet registry for each declared package's
    releases and reports the newest version allowed by the selected update
    type (major, minor or patch).

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import os
import sys
from typing import IO, List, Optional

from args import parse_args
from cli_config import apply_registry_overrides, load_config, resolve_update_policy
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from errors import ManifestError
from registry.nuget import fetch_versions, read_manifest
from versioning.models import UpdateDecision, UpdatePolicy
from versioning.service import UpdateCheckService

logger = logging.getLogger(__name__)

CSV_HEADERS = ["include", "current_version", "new_version"]


def export_json(decisions: List[UpdateDecision], stream: IO[str]) -> None:
    """Writes the update decisions as an indented JSON array.

    Args:
        decisions (list): Update decisions to serialize.
        stream (IO): Text stream to write to.
    """
    json.dump([d.to_dict() for d in decisions], stream, indent=2)
    stream.write("\n")


def export_csv(decisions: List[UpdateDecision], stream: IO[str]) -> None:
    """Writes the update decisions as CSV with a header row.

    Args:
        decisions (list): Update decisions to serialize.
        stream (IO): Text stream to write to.
    """
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADERS)
    for d in decisions:
        writer.writerow([d.name, d.current_version, d.new_version])


def output_format(args) -> str:
    """Explicit --format, else inferred from the --output extension, else json."""
    if getattr(args, "OUTPUT_FORMAT", None):
        return args.OUTPUT_FORMAT.lower()
    output = getattr(args, "OUTPUT", None)
    if output and output.lower().endswith(".csv"):
        return "csv"
    return "json"


def write_updates(decisions: List[UpdateDecision], args) -> None:
    """Serialize decisions to --output or stdout. Writes nothing when empty."""
    if not decisions:
        return
    exporter = export_csv if output_format(args) == "csv" else export_json
    path = getattr(args, "OUTPUT", None)
    if not path:
        exporter(decisions, sys.stdout)
        return
    try:
        with open(path, "w", newline="", encoding="utf-8") as file:
            exporter(decisions, file)
        logging.info("Updates have been successfully exported at: %s", path)
    except OSError as e:
        logging.error("Output file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def run_update_checker(manifest_path: str, policy: UpdatePolicy, fetch=None) -> List[UpdateDecision]:
    """Check every dependency in a manifest for updates.

    Args:
        manifest_path (str): Manifest to read.
        policy (UpdatePolicy): Allowed update scope.
        fetch (callable): Package id -> list of raw versions; defaults to the NuGet registry.

    Raises:
        ManifestError: if the manifest is unsupported or malformed.

    Returns:
        list: Update decisions in declaration order.
    """
    records = read_manifest(manifest_path)
    logging.info("Found %d package reference(s) in %s", len(records), manifest_path)

    service = UpdateCheckService(fetch or fetch_versions, policy)
    updates = service.check_all(records)
    if service.summary.skipped:
        logging.warning(
            "%d of %d package(s) could not be checked.",
            service.summary.skipped,
            service.summary.checked,
        )
    return updates


def main(argv: Optional[List[str]] = None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(
        level=getattr(args, "LOG_LEVEL", None),
        json_output=getattr(args, "LOG_JSON", None),
        log_file=getattr(args, "LOG_FILE", None),
    )

    config = load_config(getattr(args, "CONFIG", None))
    apply_registry_overrides(args, config)
    try:
        policy = resolve_update_policy(args, config)
    except ValueError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.USAGE_ERROR.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="main",
                target=args.MANIFEST,
                policy=policy.value,
                registry=Constants.REGISTRY_URL_NUGET,
            ),
        )

    if not os.path.isfile(args.MANIFEST):
        logging.error("File not found: %s, aborting", args.MANIFEST)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        updates = run_update_checker(args.MANIFEST, policy)
    except ManifestError as e:
        logging.error("Error parsing packages: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if not updates:
        logging.info("No updates found")
        sys.exit(ExitCodes.SUCCESS.value)

    write_updates(updates, args)
    logging.info("%d update(s) available (%s).", len(updates), policy.value)

    if args.ERROR_ON_UPDATES:
        sys.exit(ExitCodes.UPDATES_AVAILABLE.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
