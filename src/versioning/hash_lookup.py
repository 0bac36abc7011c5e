"""Manifest hash lookup and edition mapping."""

from typing import Optional, Tuple

from constants import Constants, Edition
from .models import HashDictionary, HashDictionaryEntry

_EDITIONS = {
    Constants.BUILD_ENTERPRISE: Edition.ENTERPRISE,
    Constants.BUILD_COMMUNITY: Edition.COMMUNITY,
}


def lookup_hash(build_hash: str, dictionary: HashDictionary) -> Optional[HashDictionaryEntry]:
    """Return the dictionary entry for ``build_hash`` or None when it is not indexed."""
    if not build_hash:
        return None
    return dictionary.get(build_hash)


def edition_for_build(build: str) -> Tuple[Edition, Optional[str]]:
    """Map a hash-dictionary build label onto an edition.

    Unrecognized labels resolve to ``Edition.UNKNOWN`` with a warning; they
    never stop resolution.
    """
    edition = _EDITIONS.get(build)
    if edition is not None:
        return edition, None
    return Edition.UNKNOWN, (
        f"Could not determine edition: the following edition was returned "
        f"in the hash results: {build}"
    )
