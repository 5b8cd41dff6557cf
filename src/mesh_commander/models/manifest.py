"""Remote manifest (catalog) models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any

from mesh_commander.errors import ManifestError
from mesh_commander.models.distribution import Distribution
from mesh_commander.utils.version_compare import minor_key

FLAVOR_TETRATE = "tetrate"
FLAVOR_TETRATE_FIPS = "tetratefips"
FLAVOR_ISTIO = "istio"

SUPPORTED_FLAVORS = (FLAVOR_TETRATE, FLAVOR_TETRATE_FIPS, FLAVOR_ISTIO)

_DATE_FORMAT = "%Y-%m-%d"


def parse_eol_date(raw: str) -> date:
    """Parse a manifest date, strictly ``YYYY-MM-DD``."""
    try:
        parsed = datetime.strptime(raw, _DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ManifestError(f"invalid date {raw!r}: expected YYYY-MM-DD") from e
    # strptime tolerates missing zero padding, the manifest format does not
    if parsed.strftime(_DATE_FORMAT) != raw:
        raise ManifestError(f"invalid date {raw!r}: expected YYYY-MM-DD")
    return parsed


def _format_date(d: date | None) -> str:
    return d.strftime(_DATE_FORMAT) if d else ""


@dataclass(frozen=True)
class CatalogEntry:
    distribution: Distribution
    k8s_versions: tuple[str, ...] = ()
    is_security_patch: bool = False
    release_notes: tuple[str, ...] = ()
    end_of_life: date | None = None

    def group(self) -> str:
        return self.distribution.group()

    @classmethod
    def from_dict(cls, d: dict) -> CatalogEntry:
        if not isinstance(d, dict):
            raise ManifestError(f"invalid distribution entry {d!r}: expected a JSON object")
        version = d.get("version", "")
        flavor = d.get("flavor", "")
        flavor_version = d.get("flavor_version", 0)
        if not isinstance(version, str) or not isinstance(flavor, str):
            raise ManifestError(f"invalid distribution entry {d!r}: version and flavor must be strings")
        # bool is an int subclass
        if isinstance(flavor_version, bool) or not isinstance(flavor_version, int) or flavor_version < 0:
            raise ManifestError(
                f"invalid distribution entry {d!r}: flavor_version must be a non-negative integer"
            )
        eol = d.get("end_of_life") or ""
        return cls(
            distribution=Distribution(version=version, flavor=flavor, flavor_version=flavor_version),
            k8s_versions=tuple(d.get("k8s_versions") or ()),
            is_security_patch=bool(d.get("is_security_patch", False)),
            release_notes=tuple(d.get("release_notes") or ()),
            end_of_life=parse_eol_date(eol) if eol else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.distribution.version,
            "flavor": self.distribution.flavor,
            "flavor_version": self.distribution.flavor_version,
            "k8s_versions": list(self.k8s_versions),
            "is_security_patch": self.is_security_patch,
            "release_notes": list(self.release_notes),
            "end_of_life": _format_date(self.end_of_life),
        }


@dataclass
class Manifest:
    entries: list[CatalogEntry] = field(default_factory=list)
    # key: "x.y", e.g. "1.7"
    eol_dates: dict[str, date] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> Manifest:
        if not isinstance(d, dict):
            raise ManifestError("manifest must be a JSON object")
        eol_dates = {
            minor: parse_eol_date(raw)
            for minor, raw in (d.get("istio_minor_versions_eol_dates") or {}).items()
        }
        entries = [CatalogEntry.from_dict(e) for e in d.get("istio_distributions") or []]
        return cls(entries=_inherit_eol(entries, eol_dates), eol_dates=eol_dates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "istio_distributions": [e.to_dict() for e in self.entries],
            "istio_minor_versions_eol_dates": {
                k: _format_date(v) for k, v in self.eol_dates.items()
            },
        }

    @property
    def distributions(self) -> list[Distribution]:
        return [e.distribution for e in self.entries]

    def contains(self, distribution: Distribution) -> bool:
        return any(e.distribution == distribution for e in self.entries)

    def get(self, distribution: Distribution) -> CatalogEntry | None:
        for e in self.entries:
            if e.distribution == distribution:
                return e
        return None


def _inherit_eol(entries: list[CatalogEntry], eol_dates: dict[str, date]) -> list[CatalogEntry]:
    """Fill each entry's end of life from the per-minor table when unset."""
    by_minor = {}
    for minor, eol in eol_dates.items():
        key = minor_key(minor)
        if key is None:
            raise ManifestError(f"invalid minor version {minor!r} in end-of-life dates")
        by_minor[key] = eol

    result: list[CatalogEntry] = []
    for entry in entries:
        if entry.end_of_life is None:
            key = minor_key(entry.distribution.version)
            if key in by_minor:
                entry = replace(entry, end_of_life=by_minor[key])
        result.append(entry)
    return result
