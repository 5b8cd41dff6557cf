"""Check the versions running in a mesh against the manifest."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

from mesh_commander.core.catalog_query import find_latest_in_group, lowest_per_group
from mesh_commander.models import Advisory, Outcome, Plane
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import Manifest
from mesh_commander.models.mesh import MeshVersionReport

logger = logging.getLogger(__name__)

UPSTREAM_NOTICE = (
    "Please install distributions with tetrate flavor listed in `mcom list` command"
)
NOTHING_TO_CHECK = "nothing to check."


def collect_lowest_per_group(raw_versions: Iterable[str]) -> dict[str, Distribution]:
    """Parse reported versions and keep the oldest flavored one per group.

    Upstream (unflavored) builds are skipped with a warning; anything that
    fails to parse aborts the whole collection.
    """
    flavored: list[Distribution] = []
    for raw in raw_versions:
        d = Distribution.parse(raw)
        if d.is_upstream():
            logger.warning("%s is an upstream build and is not checked. %s", raw, UPSTREAM_NOTICE)
            continue
        flavored.append(d)
    return lowest_per_group(flavored)


def multiple_minor_versions_message(plane: Plane, groups: Iterable[str]) -> str:
    return f"- Your {plane.value} running in multiple minor versions: {', '.join(sorted(groups))}"


def group_message(current: Distribution, manifest: Manifest) -> tuple[str, bool]:
    """Advise on a single group. Returns (message, is_latest)."""
    group = current.group()
    latest, includes_security_patch = find_latest_in_group(current, manifest)
    if latest is None:
        return (
            f"- The minor version {group} is no longer supported by mcom. "
            'We recommend you use the higher minor versions in "mcom list"',
            False,
        )

    if latest.distribution == current:
        return f"- {current} is the latest version in {group}", True

    if includes_security_patch:
        return (
            f"- There is the available patch for the minor version {group} "
            "which includes **security upgrades**. "
            f"We strongly recommend upgrading all {group} versions -> {latest.distribution}",
            False,
        )
    return (
        f"- There is the available patch for the minor version {group}. "
        f"We recommend upgrading all {group} versions -> {latest.distribution}",
        False,
    )


def _merge_lowest(
    data_plane: dict[str, Distribution], control_plane: dict[str, Distribution]
) -> dict[str, Distribution]:
    merged = dict(data_plane)
    for group, d in control_plane.items():
        current = merged.get(group)
        if current is None or current.greater_than(d):
            merged[group] = d
    return merged


def build_advisory(
    data_plane: dict[str, Distribution],
    control_plane: dict[str, Distribution],
    manifest: Manifest,
) -> Advisory:
    """Turn per-group versions of both planes into advisory messages."""
    messages: list[str] = []

    for plane, groups in ((Plane.DATA, data_plane), (Plane.CONTROL, control_plane)):
        if len(groups) > 1:
            messages.append(multiple_minor_versions_message(plane, groups))

    if len(data_plane) == 1 and len(control_plane) == 1:
        (dp,), (cp,) = data_plane.keys(), control_plane.keys()
        if dp != cp:
            messages.append(
                f"- Your data plane running in the minor version {dp} but control plane in {cp}"
            )

    merged = _merge_lowest(data_plane, control_plane)
    if not merged:
        messages.append(NOTHING_TO_CHECK)
        return Advisory(messages=messages, outcome=Outcome.CLEAN)

    all_latest = True
    for group in sorted(merged):
        message, is_latest = group_message(merged[group], manifest)
        messages.append(message)
        all_latest = all_latest and is_latest

    return Advisory(
        messages=messages,
        outcome=Outcome.CLEAN if all_latest else Outcome.ISSUES_FOUND,
    )


def check_mesh(report: MeshVersionReport, manifest: Manifest) -> Advisory:
    data_plane = collect_lowest_per_group(report.data_plane_versions)
    control_plane = collect_lowest_per_group(report.control_plane_versions)
    return build_advisory(data_plane, control_plane, manifest)


def _with_counts(versions: list[str], unit: str | None = None) -> str:
    counts = Counter(versions)
    if unit is None:
        return ", ".join(sorted(counts))
    return ", ".join(sorted(f"{v} ({n} {unit})" for v, n in counts.items()))


def summarize_versions(report: MeshVersionReport) -> list[str]:
    """Describe the client, data plane and control plane versions."""
    lines = [f"active istioctl version: {report.client_version}"]
    if report.data_plane:
        lines.append(f"data plane version: {_with_counts(report.data_plane_versions, 'proxies')}")
    if report.control_plane:
        lines.append(f"control plane version: {_with_counts(report.control_plane_versions)}")
    return lines
