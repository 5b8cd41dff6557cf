"""mcom list - List available Istio distributions."""

from __future__ import annotations

import typer

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import OutputOption
from mesh_commander.core.manifest_fetcher import fetch_manifest
from mesh_commander.output.formatters import output_manifest

app = typer.Typer()


@app.callback(invoke_without_command=True)
def list_distributions(output: str = OutputOption) -> None:
    """List available Istio distributions from the manifest.

    '*' marks the currently active istioctl.
    """
    with handle_errors():
        ctx = load_context()
        manifest = fetch_manifest()
        output_manifest(manifest, ctx.config.distribution, output)
