"""Latest-in-group and security-patch queries against the manifest."""

from __future__ import annotations

import logging
from typing import Iterable

from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import CatalogEntry, Manifest

logger = logging.getLogger(__name__)


def find_latest_in_group(
    reference: Distribution, manifest: Manifest
) -> tuple[CatalogEntry | None, bool]:
    """Find the newest manifest entry in the reference's group.

    Returns (latest, includes_security_patch). ``latest`` is None when the
    group is absent from the manifest. ``includes_security_patch`` is True if
    any entry strictly newer than ``reference`` is a security patch, even one
    that has since been superseded.
    """
    reference_group = reference.group()

    latest: CatalogEntry | None = None
    includes_security_patch = False
    for entry in manifest.entries:
        if entry.group() != reference_group:
            continue

        if entry.is_security_patch and entry.distribution.greater_than(reference):
            includes_security_patch = True

        if latest is None or entry.distribution.greater_than(latest.distribution):
            latest = entry

    if latest is None:
        logger.debug("Group %s not found in manifest", reference_group)
    return latest, includes_security_patch


def latest_per_group(distributions: Iterable[Distribution]) -> dict[str, Distribution]:
    """Reduce distributions to the newest one per group, keeping first-seen group order."""
    result: dict[str, Distribution] = {}
    for d in distributions:
        group = d.group()
        current = result.get(group)
        if current is None or d.greater_than(current):
            result[group] = d
    return result


def lowest_per_group(distributions: Iterable[Distribution]) -> dict[str, Distribution]:
    """Reduce distributions to the oldest one per group, keeping first-seen group order."""
    result: dict[str, Distribution] = {}
    for d in distributions:
        group = d.group()
        current = result.get(group)
        if current is None or current.greater_than(d):
            result[group] = d
    return result
