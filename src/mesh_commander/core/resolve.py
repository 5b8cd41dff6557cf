"""Resolve CLI flags into a concrete distribution."""

from __future__ import annotations

import logging
import re
from typing import Callable

from mesh_commander.core.catalog_query import find_latest_in_group
from mesh_commander.errors import DistributionParseError, ResolutionError
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import FLAVOR_TETRATE, SUPPORTED_FLAVORS, Manifest
from mesh_commander.utils.version_compare import minor_key, parse_version

logger = logging.getLogger(__name__)

_SET_FLAGS = ("--set", "-s")
# --manifests=dir, -f=values.yaml, --revision=1-8-3
_FLAG_ASSIGNMENT = re.compile(r"^--?[\w./]+=[\w./:-]+$", re.ASCII)
# --set=profile=demo, -s=hub=gcr.io/istio-testing
_SET_ASSIGNMENT = re.compile(r"^(--set|-s)=[\w./]+=[\w./:-]+$", re.ASCII)


def _parse_name(name: str) -> Distribution:
    try:
        return Distribution.parse(name)
    except DistributionParseError as e:
        raise ResolutionError(f"cannot parse given name {name} to istio distribution: {e}") from e


def resolve_fetch_target(
    manifest: Manifest,
    name: str = "",
    version: str = "",
    flavor: str = "",
    flavor_version: int = -1,
) -> Distribution:
    """Pick the distribution ``mcom fetch`` should download.

    - ``name`` wins over every other flag.
    - Missing or unknown flavors fall back to "tetrate".
    - No version picks the first manifest entry of that flavor.
    - An ``x.y`` version picks the latest patch of that minor.
    - A negative flavor version picks the highest one for version and flavor.
    """
    if name:
        return _parse_name(name)

    if flavor not in SUPPORTED_FLAVORS:
        logger.info("fallback to the %s flavor since --flavor flag is not given or not supported", FLAVOR_TETRATE)
        flavor = FLAVOR_TETRATE

    if not version:
        for d in manifest.distributions:
            if d.flavor == flavor:
                return d
        raise ResolutionError(f"no distribution of flavor {flavor} found in the manifest")

    if version.count(".") == 1:
        version = _latest_patch(manifest, version, flavor)

    if flavor_version < 0:
        candidates = [
            d.flavor_version for d in manifest.distributions
            if d.version == version and d.flavor == flavor
        ]
        if not candidates:
            raise ResolutionError(f"unsupported version={version} and flavor={flavor}")
        flavor_version = max(candidates)
        logger.info(
            "fallback to the flavor %d version which is the latest one in %s-%s",
            flavor_version, version, flavor,
        )

    return Distribution(version=version, flavor=flavor, flavor_version=flavor_version)


def _latest_patch(manifest: Manifest, minor: str, flavor: str) -> str:
    wanted = minor_key(minor)
    if wanted is None:
        raise ResolutionError(f"invalid version {minor}")

    best = None
    best_raw = ""
    for d in manifest.distributions:
        if d.flavor != flavor or minor_key(d.version) != wanted:
            continue
        cur = parse_version(d.version)
        if best is None or cur > best:
            best, best_raw = cur, d.version

    if best is None:
        raise ResolutionError(f"invalid version {minor}: no {flavor} distribution in that minor version")
    logger.info("fallback to %s which is the latest patch version in the given minor version %s", best_raw, minor)
    return best_raw


def resolve_switch_target(
    active: Distribution | None,
    manifest_loader: Callable[[], Manifest],
    name: str = "",
    version: str = "",
    flavor: str = "",
    flavor_version: int = -1,
) -> Distribution:
    """Pick the distribution ``mcom switch`` should activate.

    Flags left unset are taken from the active distribution. An ``x.y``
    version resolves to the latest patch of that group in the manifest.
    """
    if name:
        return _parse_name(name)

    if active is None and (not version or not flavor or flavor_version < 0):
        raise ResolutionError("cannot infer the target version, no active distribution exists")

    version = version or active.version
    flavor = flavor or active.flavor
    explicit_flavor_version = flavor_version >= 0
    if not explicit_flavor_version:
        flavor_version = active.flavor_version

    parts = version.split(".")
    if len(parts) not in (2, 3):
        raise ResolutionError(f"cannot infer the target version, the version {version} is invalid")

    if len(parts) == 2:
        reference = Distribution(version=f"{version}.0", flavor=flavor, flavor_version=flavor_version)
        try:
            latest, _ = find_latest_in_group(reference, manifest_loader())
        except DistributionParseError as e:
            raise ResolutionError(f"cannot infer the target version: {e}") from e
        if latest is None:
            raise ResolutionError(f"no distribution found in the manifest for {reference.group()}")
        version = latest.distribution.version
        if not explicit_flavor_version:
            flavor_version = latest.distribution.flavor_version

    return Distribution(version=version, flavor=flavor, flavor_version=flavor_version)


def resolve_prune_target(version: str = "", flavor: str = "", flavor_version: int = -1) -> Distribution | None:
    """None means "everything but the active one"."""
    if not version and not flavor and flavor_version < 0:
        return None
    if not version or not flavor or flavor_version < 0:
        raise ResolutionError(
            'all of "--version", "--flavor" and "--flavor-version" flags must be given '
            "when removing a specific version"
        )
    return Distribution(version=version, flavor=flavor, flavor_version=flavor_version)


def preprocess_istioctl_args(args: list[str]) -> list[str]:
    """Split ``--flag=value`` and ``--set=key=value`` into two arguments.

    A value following ``--set``/``-s`` is left alone, so ``--set a=b`` keeps
    its ``a=b``.
    """
    out: list[str] = []
    prev = ""
    for a in args:
        if prev not in _SET_FLAGS and (_SET_ASSIGNMENT.match(a) or _FLAG_ASSIGNMENT.match(a)):
            flag, _, value = a.partition("=")
            out.extend([flag.strip(), value.strip()])
        else:
            out.append(a.strip())
        prev = a
    return out


def istioctl_args(args: list[str], default_hub: str = "") -> list[str]:
    """Insert ``--set hub=<default_hub>`` into install commands that lack one."""
    out = preprocess_istioctl_args(args)
    has_install = False
    has_hub = False
    prev = ""
    for a in out:
        if a == "install":
            has_install = True
        if prev in _SET_FLAGS and a.partition("=")[0] == "hub" and "=" in a:
            has_hub = True
        prev = a

    if has_install and not has_hub and default_hub:
        out.extend(["--set", f"hub={default_hub}"])
    return out


def _install_check_args(args: list[str], base: list[str], precheck: bool) -> list[str]:
    """Carry the install flags a check understands over to ``base``.

    Returns an empty list when ``args`` is not an install command or asks
    for help.
    """
    if "--help" in args or "-h" in args:
        return []

    out = list(base)
    has_install = False
    prev = ""
    for a in preprocess_istioctl_args(args):
        if a == "install":
            has_install = True
        if prev in ("-f", "--filename", "--revision", "-r"):
            out.extend([prev, a])
        elif prev in _SET_FLAGS:
            key, sep, value = a.partition("=")
            if sep and key.strip() == "values.global.istioNamespace":
                out.extend(["--istioNamespace", value])
        elif prev in ("--manifests", "-d") and not precheck:
            out.extend([prev, a])
        prev = a
    return out if has_install else []


def precheck_args(args: list[str], kubeconfig: str) -> list[str]:
    """``istioctl x precheck`` arguments run before an install."""
    return _install_check_args(args, ["x", "precheck", "--kubeconfig", kubeconfig], precheck=True)


def verify_install_args(args: list[str], kubeconfig: str) -> list[str]:
    """``istioctl verify-install`` arguments run after an install."""
    return _install_check_args(args, ["verify-install", "--kubeconfig", kubeconfig], precheck=False)
