"""Exception hierarchy for Mesh Commander."""

from __future__ import annotations


class MeshCommanderError(Exception):
    """Base class for all errors surfaced to the CLI."""


class DistributionParseError(MeshCommanderError, ValueError):
    """A distribution string could not be parsed."""


class MalformedVersionError(DistributionParseError):
    """The version segment is not exactly three non-negative integers."""


class MalformedFlavorError(DistributionParseError):
    """The flavor segment is missing or its revision is not ``v<int>``."""


class IncomparableGroupsError(MeshCommanderError):
    """Two distributions from different groups were compared."""


class ManifestError(MeshCommanderError):
    """The remote manifest could not be fetched or decoded."""


class NotFetchedError(MeshCommanderError):
    """The requested istioctl is not installed locally."""


class ResolutionError(MeshCommanderError):
    """CLI parameters could not be resolved to a single distribution."""


class IstioctlError(MeshCommanderError):
    """Downloading or executing istioctl failed."""


class ConfigError(MeshCommanderError):
    """The persisted configuration could not be read."""
