"""Loose version helpers for minor-version keys like "1.7"."""

from __future__ import annotations

from packaging.version import InvalidVersion, Version


def parse_version(v: str) -> Version | None:
    """Parse a version string, returning None on failure."""
    try:
        return Version(v)
    except InvalidVersion:
        # Try stripping leading 'v'
        if v.startswith("v"):
            try:
                return Version(v[1:])
            except InvalidVersion:
                pass
    return None


def minor_key(v: str) -> tuple[int, int] | None:
    """Return (major, minor) of ``v``, or None if it does not parse."""
    parsed = parse_version(v)
    if parsed is None:
        return None
    return parsed.major, parsed.minor


def is_higher_minor(candidate: str, base: str) -> bool:
    """Return True if candidate's major.minor is above base's."""
    cand = minor_key(candidate)
    cur = minor_key(base)
    if cand is None or cur is None:
        return False
    return cand > cur
