"""Application configuration and defaults."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from mesh_commander.errors import ConfigError
from mesh_commander.models.distribution import Distribution

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_URL = "https://istio.tetratelabs.io/getmesh/manifest.json"
DOWNLOAD_URL_WITH_ARCH = "https://istio.tetratelabs.io/getmesh/files/istio-{name}-{os}-{arch}.tar.gz"
DOWNLOAD_URL_WITHOUT_ARCH = "https://istio.tetratelabs.io/getmesh/files/istio-{name}-{os}.tar.gz"


def _default_home_dir() -> Path:
    """Return the Mesh Commander home directory.

    MCOM_HOME wins over the per-user default.
    """
    home = os.environ.get("MCOM_HOME", "")
    if home:
        return Path(home)
    return Path.home() / ".mcom"


def _default_manifest_path() -> Path | None:
    path = os.environ.get("MCOM_TEST_MANIFEST_PATH", "")
    return Path(path) if path else None


@dataclass
class Settings:
    home_dir: Path = field(default_factory=_default_home_dir)
    manifest_url: str = field(
        default_factory=lambda: os.environ.get("MCOM_MANIFEST_URL", DEFAULT_MANIFEST_URL)
    )
    # Local manifest file used instead of the URL (tests, air-gapped hosts)
    manifest_path: Path | None = field(default_factory=_default_manifest_path)
    download_url_with_arch: str = DOWNLOAD_URL_WITH_ARCH
    download_url_without_arch: str = DOWNLOAD_URL_WITHOUT_ARCH
    request_timeout: int = 30

    @property
    def config_file(self) -> Path:
        return self.home_dir / "config.json"


# Global singleton
settings = Settings()


@dataclass(frozen=True)
class ActiveConfig:
    """The active istioctl and default hub, persisted in the home directory.

    Values are immutable; ``with_*`` returns an updated copy that the caller
    saves explicitly.
    """

    distribution: Distribution | None = None
    default_hub: str = ""

    @classmethod
    def load(cls, home_dir: Path) -> ActiveConfig:
        path = home_dir / "config.json"
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"error unmarshalling configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"error unmarshalling configuration {path}: expected a JSON object")
        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, d: dict) -> ActiveConfig:
        raw = d.get("istio_distribution")
        if raw is not None and not isinstance(raw, dict):
            raise ConfigError("error unmarshalling configuration: istio_distribution must be an object")
        distribution = None
        if raw and raw.get("version"):
            distribution = Distribution(
                version=raw["version"],
                flavor=raw.get("flavor", ""),
                flavor_version=raw.get("flavor_version", 0),
            )
        return cls(distribution=distribution, default_hub=d.get("default_hub", ""))

    def to_dict(self) -> dict:
        d = self.distribution
        return {
            "istio_distribution": {
                "version": d.version,
                "flavor": d.flavor,
                "flavor_version": d.flavor_version,
            } if d else None,
            "default_hub": self.default_hub,
        }

    def save(self, home_dir: Path) -> None:
        home_dir.mkdir(parents=True, exist_ok=True)
        (home_dir / "config.json").write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    def with_distribution(self, distribution: Distribution) -> ActiveConfig:
        return replace(self, distribution=distribution)

    def with_default_hub(self, hub: str) -> ActiveConfig:
        return replace(self, default_hub=hub)
