from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from mesh_commander.config.settings import settings
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import CatalogEntry, Manifest


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home_dir = tmp_path / "home"
    monkeypatch.setattr(settings, "home_dir", home_dir)
    monkeypatch.setattr(settings, "manifest_path", None)
    return home_dir


@pytest.fixture
def install(home: Path) -> Callable[[str], Path]:
    """Create an empty istioctl binary for a distribution name."""

    def _install(name: str) -> Path:
        path = home / "istio" / name / "bin" / "istioctl"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
        return path

    return _install


@pytest.fixture
def manifest_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[[dict], Path]:
    """Write a manifest JSON file and point settings at it."""

    def _write(data: dict) -> Path:
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        monkeypatch.setattr(settings, "manifest_path", path)
        return path

    return _write


def entry(name: str, security: bool = False, k8s: tuple[str, ...] = ()) -> CatalogEntry:
    return CatalogEntry(
        distribution=Distribution.parse(name),
        is_security_patch=security,
        k8s_versions=k8s,
    )


@pytest.fixture
def make_manifest() -> Callable[..., Manifest]:
    """Build a Manifest from ``name`` or ``(name, is_security_patch)`` items."""

    def _make(*items, eol_dates=None) -> Manifest:
        entries = []
        for item in items:
            if isinstance(item, tuple):
                entries.append(entry(*item))
            else:
                entries.append(entry(item))
        return Manifest(entries=entries, eol_dates=eol_dates or {})

    return _make
