"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3


class Edition(Enum):
    """GitLab editions reported in results.

    Args:
        Enum (string): Edition labels as emitted in the report.
    """

    ENTERPRISE = "enterprise"
    COMMUNITY = "community"
    UNKNOWN = "unknown"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VERSION = "1.2.0"
    UNKNOWN = "unknown"

    # Upstream datasets
    HASHES_URL = "https://raw.githubusercontent.com/righel/gitlab-version-nse/main/gitlab_hashes.json"
    ENDOFLIFE_URL = "https://endoflife.date/api/gitlab.json"
    ENDOFLIFE_PAGE_URL = "https://endoflife.date/gitlab"
    HASHES_PROJECT_URL = "https://github.com/righel/gitlab-version-nse/"

    # GitLab release tags (gitlab-org/gitlab)
    GITLAB_API_BASE = "https://gitlab.com/api/v4"
    GITLAB_PROJECT_ID = 278964
    TAGS_PER_PAGE = 50

    # Build labels from the hash dictionary
    BUILD_ENTERPRISE = "gitlab-ee"
    BUILD_COMMUNITY = "gitlab-ce"

    # Target probing
    MANIFEST_PATH = "/assets/webpack/manifest.json"
    DEFAULT_SCHEME = "https://"
    MANIFEST_PRODUCT_MARKER = "gitlab"
    USER_AGENT = f"gitlab-fingerprinter/{VERSION}"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ANALYSIS = "[ANALYSIS]"
    ENV_LOG_LEVEL = "GITLAB_FINGERPRINTER_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Hash dictionary is refreshed upstream once a day
    FRESHNESS_THRESHOLD_HOURS = 24
    DEFAULT_WORKERS = 1
    MAX_WORKERS = 32
