"""Distribution identity: parsing, rendering, grouping and ordering.

A distribution is tagged ``x.y.z-{flavor}-v{flavor_version}``. The upstream
build reported by a running mesh carries no tag at all and shows up as a bare
``x.y.z``; it parses into a distribution with an empty flavor.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mesh_commander.errors import (
    IncomparableGroupsError,
    MalformedFlavorError,
    MalformedVersionError,
)

_NUMBER = re.compile(r"[0-9]+")

_INT64_MAX = 2**63 - 1


def _split_version(version: str, original: str) -> tuple[int, int, int]:
    parts = version.split(".")
    if len(parts) != 3 or not all(_NUMBER.fullmatch(p) for p in parts):
        raise MalformedVersionError(
            f"invalid version: cannot parse {version!r} in {original!r} in the form of 'x.y.z'"
        )
    return int(parts[0]), int(parts[1]), int(parts[2])


def _parse_flavor(rest: str, original: str) -> tuple[str, int]:
    flavor, sep, revision = rest.partition("-")
    if not sep:
        raise MalformedFlavorError(
            f"invalid flavor segment {rest!r} in {original!r}: expected '{{flavor}}-v{{n}}'"
        )
    if not revision.startswith("v") or not _NUMBER.fullmatch(revision[1:]):
        raise MalformedFlavorError(
            f"invalid flavor version {revision!r} in {original!r}: expected 'v' followed by an integer"
        )
    value = int(revision[1:])
    if value > _INT64_MAX:
        raise MalformedFlavorError(f"flavor version {revision!r} in {original!r} is out of range")
    return flavor, value


@dataclass(frozen=True)
class Distribution:
    version: str
    flavor: str = ""
    flavor_version: int = 0

    @classmethod
    def parse(cls, s: str) -> Distribution:
        """Parse ``x.y.z`` or ``x.y.z-{flavor}-v{n}``.

        Raises MalformedVersionError or MalformedFlavorError naming the bad
        segment together with the original input.
        """
        version, sep, rest = s.partition("-")
        _split_version(version, s)
        if not sep:
            return cls(version=version)
        flavor, flavor_version = _parse_flavor(rest, s)
        return cls(version=version, flavor=flavor, flavor_version=flavor_version)

    def render(self) -> str:
        # The flavor is always rendered, so an upstream build comes out as
        # "x.y.z--v0" rather than the bare "x.y.z" it was parsed from.
        return f"{self.version}-{self.flavor}-v{self.flavor_version}"

    def __str__(self) -> str:
        return self.render()

    def is_upstream(self) -> bool:
        return self.flavor == ""

    def patch(self) -> int:
        return _split_version(self.version, self.render())[2]

    def minor(self) -> str:
        """Return ``major.minor``, the key used for end-of-life dates."""
        major, minor, _ = _split_version(self.version, self.render())
        return f"{major}.{minor}"

    def group(self) -> str:
        parts = self.version.split(".")
        _split_version(self.version, self.render())
        return f"{parts[0]}.{parts[1]}-{self.flavor}"

    def greater_than(self, other: Distribution) -> bool:
        """Order two distributions of the same group.

        Patch number first, flavor version as tiebreak. Distributions from
        different groups have no order and raise IncomparableGroupsError.
        """
        mine, theirs = self.group(), other.group()
        if mine != theirs:
            raise IncomparableGroupsError(
                f"cannot compare distributions in different groups: {self} ({mine}) and {other} ({theirs})"
            )
        mp, tp = self.patch(), other.patch()
        if mp == tp:
            return self.flavor_version > other.flavor_version
        return mp > tp
