"""mcom version - Show versions of mcom, the cluster, and the active istioctl."""

from __future__ import annotations

import logging
import re
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.core.istioctl import NO_POD_RUNNING_MSG
from mesh_commander.core.k8s_client import K8sClient

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)

_CLIENT_VERSION_LINE = re.compile(r"(?m)[\r\n]+^.*client\sversion.*$")


def mcom_version() -> str:
    try:
        return package_version("mesh-commander")
    except PackageNotFoundError:
        return "dev"


@app.callback(invoke_without_command=True)
def version(
    remote: bool = typer.Option(True, "--remote/--no-remote", help="Query the control plane and data plane"),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", "-c", help="Kubernetes configuration file"),
    context: Optional[str] = typer.Option(None, "--context", help="Kubernetes context name"),
) -> None:
    """Show the versions of mcom, the Kubernetes cluster, istiod, Envoy and the active istioctl."""
    with handle_errors():
        ctx = load_context()
        active = ctx.config.distribution
        ctx.store.require(active)
        console.print(f"mcom version: {mcom_version()}\nactive istioctl: {active}", highlight=False)

        try:
            platform, git_version = K8sClient(context=context, kubeconfig=kubeconfig).server_version()
            console.print(f"active kubernetes cluster run in {platform} platform in version {git_version}")
        except Exception:
            logger.debug("Failed to query the Kubernetes server version", exc_info=True)
            console.print("[dim]no active Kubernetes clusters found[/dim]")

        if not remote:
            return

        result = ctx.store.run(active, ["version", "--remote=true"], capture=True)
        if NO_POD_RUNNING_MSG in result.stdout:
            console.print(NO_POD_RUNNING_MSG)
        else:
            console.print(escape(_CLIENT_VERSION_LINE.sub("", result.stdout)), highlight=False)
