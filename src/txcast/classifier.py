"""Duplicate-submission classification of network error text."""

from __future__ import annotations

from collections.abc import Mapping

from .constants import DUPLICATE_SUBMISSION_MARKERS
from .types import ChainFamily


def find_duplicate_marker(
    family: ChainFamily,
    error_text: str | None,
    markers: Mapping[ChainFamily, tuple[str, ...]] | None = None,
) -> str | None:
    """Return the first marker of ``family`` found in ``error_text``.

    Args:
        family: Chain family whose marker list is consulted
        error_text: Error message reported by the network or client
        markers: Optional replacement for the default marker table

    Returns:
        The matching marker, or None when the text looks like a genuine failure
    """
    if not error_text:
        return None

    table = DUPLICATE_SUBMISSION_MARKERS if markers is None else markers
    haystack = error_text.lower()
    for marker in table.get(family, ()):
        if marker and marker.lower() in haystack:
            return marker
    return None


def looks_already_submitted(
    family: ChainFamily,
    error_text: str | None,
    markers: Mapping[ChainFamily, tuple[str, ...]] | None = None,
) -> bool:
    """Whether ``error_text`` suggests the network already accepted the transaction."""
    return find_duplicate_marker(family, error_text, markers) is not None
