"""Argument parsing functionality for the GitLab fingerprinter."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="gitlab-fingerprinter",
        description=(
            "Fingerprint the version and edition of GitLab installations "
            "and flag outdated or end-of-life releases"
        ),
        epilog=(
            "Examples:\n"
            "  gitlab-fingerprinter https://gitlab.foo.com\n"
            "  gitlab-fingerprinter https://gitlab.example.com gitlab.example.foo http://git.example.bar"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("targets",
                        metavar="TARGET",
                        help="GitLab URL or hostname (https:// is assumed when no scheme is given)",
                        nargs="+",
                        type=str)
    parser.add_argument("-v", "--version",
                        action="version",
                        version=f"%(prog)s {Constants.VERSION}")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Also write the JSON report to this file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-w", "--workers",
                        dest="WORKERS",
                        help="Number of targets fingerprinted in parallel (default: 1)",
                        action="store",
                        type=int)
    parser.add_argument("--freshness-hours",
                        dest="FRESHNESS_HOURS",
                        help="Age in hours under which an unknown hash is assumed not yet indexed (default: 24)",
                        action="store",
                        type=int)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="HTTP request timeout in seconds (default: 30)",
                        action="store",
                        type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $GITLAB_FINGERPRINTER_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if warnings or errors are present.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not print the report to stdout.",
                        action="store_true")

    return parser.parse_args(argv)
