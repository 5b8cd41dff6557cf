"""End-of-life and security-patch checks for locally installed istioctl."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from mesh_commander.core.catalog_query import find_latest_in_group, latest_per_group
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import Manifest
from mesh_commander.utils.version_compare import is_higher_minor

logger = logging.getLogger(__name__)


def one_month_before(d: date) -> date:
    """Step back one calendar month. A day the earlier month lacks rolls over,
    so March 31 becomes March 3 (March 2 in leap years).
    """
    year, month = (d.year, d.month - 1) if d.month > 1 else (d.year - 1, 12)
    return date(year, month, 1) + timedelta(days=d.day - 1)


def check_end_of_life(
    active: Distribution | None, manifest: Manifest, today: date
) -> list[str]:
    """Warn from one month before the active minor version's end of life."""
    if active is None:
        return []

    minor = active.minor()
    eol = manifest.eol_dates.get(minor)
    if eol is None or today < one_month_before(eol):
        return []

    candidates = [
        str(d) for d in latest_per_group(manifest.distributions).values()
        if is_higher_minor(d.minor(), minor)
    ]

    return [
        f"[WARNING] Your current active minor version {minor} is reaching the end of life "
        f"on {eol.isoformat()}. We strongly recommend you to upgrade to the available "
        f"higher minor versions: {', '.join(candidates)}."
    ]


def check_security_patches(installed: list[Distribution], manifest: Manifest) -> list[str]:
    """Warn about local groups that are unsupported or missing security patches."""
    flavored = [d for d in installed if not d.is_upstream()]
    locals_ = latest_per_group(flavored)

    messages: list[str] = []
    for group in sorted(locals_):
        local = locals_[group]
        latest, includes_security_patch = find_latest_in_group(local, manifest)
        if latest is None:
            messages.append(
                f"[WARNING] The locally installed minor version {group} is no longer supported "
                'by mcom. We recommend you use the higher minor versions in "mcom list" '
                'or remove with "mcom prune"'
            )
        elif includes_security_patch and latest.distribution != local:
            messages.append(
                f"[WARNING] The locally installed minor version {group} has a latest version "
                f"{latest.distribution} including security patches. We strongly recommend you "
                f'to download {latest.distribution} by "mcom fetch".'
            )
    return messages


def check_before_install(active: Distribution, manifest: Manifest) -> list[str]:
    """Warnings shown before ``istioctl install`` runs with an outdated binary."""
    if not manifest.contains(active):
        return [
            f"Your active istioctl of version {active} is deprecated. We recommend you use "
            'the supported distribution listed in "mcom list" command.'
        ]

    latest, _ = find_latest_in_group(active, manifest)
    if latest is not None and latest.distribution != active:
        return [
            f"Your current patch version {active} is not the latest version {latest.distribution}. "
            'We recommend you fetch the latest version through "mcom fetch" command, '
            'and switch to the latest version through "mcom switch" command.'
        ]
    return []


def run_checks(
    active: Distribution | None,
    installed: list[Distribution],
    manifest: Manifest,
    today: date | None = None,
) -> list[str]:
    """Run every local check, logging each warning."""
    messages = check_end_of_life(active, manifest, today or date.today())
    messages.extend(check_security_patches(installed, manifest))
    for m in messages:
        logger.warning(m)
    return messages
