"""Fetch the distribution manifest from the network or a local file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from mesh_commander.config.settings import settings
from mesh_commander.errors import ManifestError
from mesh_commander.models.manifest import Manifest

logger = logging.getLogger(__name__)


def fetch_manifest(url: str | None = None, path: Path | None = None) -> Manifest:
    """Load the manifest, fresh on every call.

    A local path (argument or MCOM_TEST_MANIFEST_PATH) takes precedence over
    the URL.
    """
    path = path or settings.manifest_path
    if path is not None:
        logger.debug("Loading manifest from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(f"failed to read manifest {path}: {e}") from e
        return _decode(raw, str(path))

    url = url or settings.manifest_url
    logger.debug("Fetching manifest from %s", url)
    try:
        resp = requests.get(url, timeout=settings.request_timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ManifestError(f"failed to fetch manifest from {url}: {e}") from e
    return _decode(resp.text, url)


def _decode(raw: str, source: str) -> Manifest:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ManifestError(f"failed to decode manifest from {source}: {e}") from e
    return Manifest.from_dict(data)
