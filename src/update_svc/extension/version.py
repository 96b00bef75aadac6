"""Dotted numeric version comparison."""

from __future__ import annotations

import re


# Optional sign followed by ASCII digits; anything else parses as 0
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_part(part: str) -> int:
    if not _INT_PATTERN.fullmatch(part):
        return 0
    return int(part)


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two dotted version strings.

    Returns:
        0 if both versions are the same
        1 if version1 is more recent
        -1 if version2 is more recent

    Only the components both versions have are compared, so "1.0.1" and
    "1.0" are equal. Update clients depend on this, keep it.
    """
    parts1 = version1.split(".")
    parts2 = version2.split(".")

    for i in range(min(len(parts1), len(parts2))):
        part1 = _parse_part(parts1[i])
        part2 = _parse_part(parts2[i])
        if part1 < part2:
            return -1
        if part2 < part1:
            return 1
    return 0


def is_newer(candidate: str, installed: str) -> bool:
    """True if ``candidate`` is strictly newer than ``installed``."""
    return compare_versions(installed, candidate) < 0
