"""Kubernetes API wrapper."""

from __future__ import annotations

import os

from kubernetes import client, config


def kubeconfig_location() -> str:
    """KUBECONFIG if set, otherwise the default ~/.kube/config."""
    return os.environ.get("KUBECONFIG") or os.path.expanduser("~/.kube/config")


class K8sClient:
    """Thin wrapper around the Kubernetes Python client."""

    def __init__(self, context: str | None = None, kubeconfig: str | None = None):
        self.context = context
        self.kubeconfig = kubeconfig
        self._version: client.VersionApi | None = None
        self._api_client: client.ApiClient | None = None

    def _load_config(self) -> client.ApiClient:
        if self._api_client is not None:
            return self._api_client
        try:
            cfg = client.Configuration()
            config.load_kube_config(
                config_file=self.kubeconfig,
                context=self.context,
                client_configuration=cfg,
            )
            # Prevent indefinite hangs on unreachable clusters
            cfg.retries = 1
            self._api_client = client.ApiClient(configuration=cfg)
        except config.ConfigException:
            config.load_incluster_config()
            self._api_client = client.ApiClient()
        return self._api_client

    @property
    def version_api(self) -> client.VersionApi:
        if self._version is None:
            self._version = client.VersionApi(api_client=self._load_config())
        return self._version

    def server_version(self) -> tuple[str, str]:
        """Return (platform, git_version) of the cluster's API server."""
        info = self.version_api.get_code(_request_timeout=10)
        return info.platform, info.git_version
