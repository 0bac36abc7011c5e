"""GitLab Fingerprinter - version, edition and EOL status of GitLab installations

Probes each target's webpack manifest, resolves the build hash against the
public hash dictionary and prints a JSON report of results and errors.
"""
import sys
import logging
import json
from datetime import timedelta

from constants import ExitCodes, Constants
from common.errors import DatasetError, TargetError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, configure_runtime
from registry.endoflife import fetch_eol_records
from registry.hashes import fetch_hash_dictionary
from repository.gitlab import GitLabClient
from target.manifest import fetch_observation
from target.normalize import check_resolves, normalize_target
from versioning.cache import TagCache
from versioning.models import FingerprintReport, ResolutionError
from versioning.service import ResolutionService

logger = logging.getLogger(__name__)


def prepare_targets(raw_targets, report):
    """Normalize and DNS-check targets, recording failures in the report.

    Args:
        raw_targets (list): Targets as given on the command line.
        report (FingerprintReport): Receives an error record per rejected target.

    Returns:
        list: Targets that can be probed, in input order.
    """
    targets = []
    for raw in raw_targets:
        target = None
        try:
            target = normalize_target(raw)
            check_resolves(target)
        except TargetError as e:
            logging.error("%s: %s", e.summary, e.details)
            # Unparseable targets have no host to report
            label = target.host if target is not None else raw
            report.add(ResolutionError(target=label, error=e.summary, details=e.details))
            continue
        targets.append(target)
    return targets


def render_json(report):
    """Serialize the report with two-space indentation."""
    return json.dumps(report.to_dict(), indent=2)


def export_json(report, path):
    """Exports the report to a JSON file.

    Args:
        report (FingerprintReport): Report to export.
        path (str): File path to export the JSON.
    """
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(render_json(report))
            file.write("\n")
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def build_service():
    """Load the shared datasets and assemble the resolution service.

    Raises:
        DatasetError: If the hash dictionary or EOL dataset cannot be loaded.
    """
    hash_dictionary = fetch_hash_dictionary(Constants.HASHES_URL)
    eol_records = fetch_eol_records(Constants.ENDOFLIFE_URL)
    client = GitLabClient()
    return ResolutionService(
        hash_dictionary,
        eol_records,
        client.get_tags_for_minor,
        tag_cache=TagCache(),
        freshness_threshold=timedelta(hours=Constants.FRESHNESS_THRESHOLD_HOURS),
        hashes_url=Constants.HASHES_URL,
    )


def run(args):
    """Fingerprint every target and return the report.

    Exits with CONNECTION_ERROR when a shared dataset is unavailable, before
    any target is probed.
    """
    report = FingerprintReport()
    targets = prepare_targets(args.targets, report)

    try:
        service = build_service()
    except DatasetError as e:
        logging.error("%s: %s", e.summary, e.details)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)

    scanned = service.fingerprint_all(targets, fetch_observation, workers=Constants.DEFAULT_WORKERS)
    report.results.extend(scanned.results)
    report.errors.extend(scanned.errors)

    if is_debug_enabled(logger):
        logger.debug(
            "Fingerprinting finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="run",
                count=len(report.results),
                outcome="errors" if report.errors else "success"
            )
        )
    return report


def _add_file_handler(log_file):
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logging.getLogger().addHandler(file_handler)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if getattr(args, "LOG_FILE", None):
        _add_file_handler(args.LOG_FILE)

    try:
        configure_runtime(args)
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logging.info("Arguments parsed.")

    report = run(args)

    if not args.QUIET:
        print(render_json(report))
    if getattr(args, "OUTPUT", None):
        export_json(report, args.OUTPUT)

    if report.has_warnings():
        logging.warning("One or more targets have warnings or errors.")
        if args.ERROR_ON_WARNINGS:
            logging.error("Warnings present, exiting with non-zero status code.")
            sys.exit(ExitCodes.EXIT_WARNINGS.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
