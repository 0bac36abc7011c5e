"""Target URL normalization and DNS pre-check."""
from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from constants import Constants
from common.errors import TargetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """A scan target as given on the command line and where to probe it."""
    raw: str
    host: str
    hostname: str
    manifest_url: str


def normalize_target(arg: str) -> Target:
    """Validate a target argument and derive its manifest URL.

    A missing scheme defaults to https. Path, query and fragment are replaced
    by the webpack manifest path.

    Raises:
        TargetError: If the argument is not a usable http(s) URL.
    """
    text = (arg or "").strip()
    if not text.startswith(("http://", "https://")):
        text = Constants.DEFAULT_SCHEME + text

    try:
        parts = urlsplit(text)
        hostname = parts.hostname
        # Accessing .port validates it
        _ = parts.port
    except ValueError as exc:
        raise TargetError(str(exc), summary=f"The URL '{arg}' is not valid") from exc
    if not hostname or " " in parts.netloc:
        raise TargetError("no host could be parsed from the URL", summary=f"The URL '{arg}' is not valid")

    host = parts.netloc.rsplit("@", 1)[-1]
    manifest_url = urlunsplit((parts.scheme, host, Constants.MANIFEST_PATH, "", ""))
    return Target(raw=arg, host=host, hostname=hostname, manifest_url=manifest_url)


def check_resolves(target: Target) -> None:
    """Ensure the target hostname resolves to at least one address.

    Raises:
        TargetError: If name resolution fails or returns nothing.
    """
    try:
        infos = socket.getaddrinfo(target.hostname, None)
    except (socket.gaierror, UnicodeError) as exc:
        raise TargetError(str(exc), summary=f"Could not resolve '{target.raw}'") from exc
    if not infos:
        raise TargetError("no addresses returned", summary=f"Could not resolve '{target.raw}'")
    logger.debug("%s resolves to %d address(es)", target.hostname, len(infos))
