"""Locally installed istioctl binaries: fetch, list, remove and run."""

from __future__ import annotations

import io
import logging
import platform
import shutil
import subprocess
import tarfile
from pathlib import Path

import requests

from mesh_commander.config.settings import settings
from mesh_commander.core.k8s_client import kubeconfig_location
from mesh_commander.core.resolve import precheck_args, verify_install_args
from mesh_commander.errors import (
    DistributionParseError,
    IstioctlError,
    NotFetchedError,
    ResolutionError,
)
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import CatalogEntry, Manifest

logger = logging.getLogger(__name__)

# Printed by "istioctl version" when istiod is not running in istio-system.
NO_POD_RUNNING_MSG = 'no running Istio pods in "istio-system"'

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def download_url(distribution: Distribution) -> str:
    system = platform.system().lower()
    if system == "darwin":
        return settings.download_url_without_arch.format(name=distribution, os=system)
    machine = platform.machine().lower()
    arch = _ARCH_ALIASES.get(machine, machine)
    return settings.download_url_with_arch.format(name=distribution, os=system, arch=arch)


class IstioctlStore:
    """Layout: ``{home}/istio/{distribution}/bin/istioctl``."""

    def __init__(self, home_dir: Path):
        self.home_dir = home_dir
        self.istio_dir = home_dir / "istio"

    def istioctl_path(self, distribution: Distribution) -> Path:
        return self.istio_dir / str(distribution) / "bin" / "istioctl"

    def exists(self, distribution: Distribution) -> bool:
        return self.istioctl_path(distribution).is_file()

    def require(self, distribution: Distribution | None) -> Path:
        if distribution is None:
            raise NotFetchedError("please fetch istioctl by `mcom fetch` beforehand")
        path = self.istioctl_path(distribution)
        if not path.is_file():
            raise NotFetchedError(
                f"istioctl not fetched for {distribution}. Please run `mcom fetch`"
            )
        return path

    def fetched_versions(self) -> list[Distribution]:
        """Distributions with a directory under the istio dir, sorted by name."""
        if not self.istio_dir.is_dir():
            return []
        result: list[Distribution] = []
        for child in sorted(self.istio_dir.iterdir()):
            if not child.is_dir():
                continue
            try:
                result.append(Distribution.parse(child.name))
            except DistributionParseError:
                logger.debug("Skipping unrecognised directory %s", child)
        return result

    def remove(self, target: Distribution | None, active: Distribution | None) -> list[Distribution]:
        """Remove one distribution, or every one except the active one.

        Returns the distributions actually removed.
        """
        if target is None:
            removed = []
            for d in self.fetched_versions():
                if d == active:
                    continue
                shutil.rmtree(self.istio_dir / str(d))
                removed.append(d)
            return removed

        if target == active:
            logger.info("Skip removing %s since it is the current active version", target)
            return []

        if not self.exists(target):
            raise NotFetchedError(f"we skip removing {target} since it does not exist in your system")

        shutil.rmtree(self.istio_dir / str(target))
        return [target]

    def fetch(self, target: Distribution, manifest: Manifest) -> CatalogEntry:
        """Download ``target`` unless it is already installed."""
        entry = manifest.get(target)
        if self.exists(target):
            logger.info("%s already fetched: download skipped", target)
            return entry or CatalogEntry(distribution=target)

        if entry is None:
            raise ResolutionError(
                f"manifest not found for istioctl {target}. "
                "Please check the supported istio versions and flavors by `mcom list`"
            )

        self._download(target)
        return entry

    def _download(self, distribution: Distribution) -> None:
        url = download_url(distribution)
        logger.debug("Downloading %s", url)
        try:
            resp = requests.get(url, timeout=settings.request_timeout)
        except requests.RequestException as e:
            raise IstioctlError(f"failed to download {url}: {e}") from e
        if resp.status_code != 200:
            raise IstioctlError(f"{resp.status_code} returned for {url}")

        binary = _extract_istioctl(resp.content)
        if binary is None:
            raise IstioctlError(f"istioctl binary not found in {url}")

        path = self.istioctl_path(distribution)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(binary)
        path.chmod(0o755)

    def run(
        self,
        active: Distribution | None,
        args: list[str],
        capture: bool = False,
    ) -> subprocess.CompletedProcess:
        """Run the active istioctl. With ``capture`` stdout is returned as text.

        Install commands are wrapped: ``istioctl x precheck`` inspects the
        cluster first (when this istioctl has it), and ``verify-install``
        checks istiod and the CRDs afterwards.
        """
        path = self.require(active)
        kubeconfig = kubeconfig_location()

        precheck = precheck_args(args, kubeconfig)
        if precheck and self._has_precheck(path):
            self._precheck(path, precheck)

        result = self._exec(path, args, capture_output=capture)

        verify = verify_install_args(args, kubeconfig)
        if verify:
            self._exec(path, verify)
        return result

    def _exec(self, path: Path, args: list[str], **kwargs) -> subprocess.CompletedProcess:
        logger.debug("Running %s %s", path, " ".join(args))
        try:
            return subprocess.run([str(path), *args], text=True, check=True, **kwargs)
        except subprocess.CalledProcessError as e:
            detail = f", {e.stderr}" if e.stderr else ""
            raise IstioctlError(f"error executing istioctl: exit status {e.returncode}{detail}") from e
        except OSError as e:
            raise IstioctlError(f"error executing istioctl: {e}") from e

    def _has_precheck(self, path: Path) -> bool:
        # stable "precheck" first, then the experimental "x precheck"
        for help_args in (["--help"], ["x", "--help"]):
            try:
                result = self._exec(path, help_args, capture_output=True)
            except IstioctlError:
                logger.debug("Skipping precheck, %s %s failed", path, " ".join(help_args))
                return False
            if "precheck" in result.stdout:
                return True
        return False

    def _precheck(self, path: Path, args: list[str]) -> None:
        result = self._exec(path, args, stderr=subprocess.PIPE)
        if result.stderr:
            # e.g. istiod already installed in the namespace
            logger.info(result.stderr.rstrip())


def _extract_istioctl(archive: bytes) -> bytes | None:
    with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tar:
        for member in tar:
            if member.isfile() and Path(member.name).name == "istioctl":
                f = tar.extractfile(member)
                if f is not None:
                    return f.read()
    return None
