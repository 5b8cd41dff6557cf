"""mcom check-upgrade - Check the running mesh for available patches."""

from __future__ import annotations

import json

import typer
from rich.console import Console

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import OutputOption
from mesh_commander.core.check_upgrade import check_mesh, summarize_versions
from mesh_commander.core.istioctl import NO_POD_RUNNING_MSG
from mesh_commander.core.manifest_checker import run_checks
from mesh_commander.core.manifest_fetcher import fetch_manifest
from mesh_commander.errors import IstioctlError
from mesh_commander.models.mesh import MeshVersionReport
from mesh_commander.output.formatters import output_advisory

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def check_upgrade(output: str = OutputOption) -> None:
    """Check if there are patches available in the running minor versions.

    A minor version is named x.y-{flavor}, e.g. 1.7-tetrate. Exits with
    status 1 when any minor version needs attention.
    """
    with handle_errors():
        ctx = load_context()
        active = ctx.config.distribution
        ctx.store.require(active)

        with console.status("[bold cyan]Fetching manifest…") as status:
            manifest = fetch_manifest()
            local_warnings = run_checks(active, ctx.store.fetched_versions(), manifest)

            status.update("[bold cyan]Querying mesh versions…")
            result = ctx.store.run(active, ["version", "-o", "json"], capture=True)

        if NO_POD_RUNNING_MSG in result.stdout:
            console.print(NO_POD_RUNNING_MSG)
            return

        try:
            report = MeshVersionReport.from_dict(json.loads(result.stdout))
        except (ValueError, AttributeError) as e:
            raise IstioctlError(f"failed to parse istio version results: {e}: {result.stdout}") from e

        advisory = check_mesh(report, manifest)

    output_advisory(summarize_versions(report), local_warnings, advisory, output)
    if advisory.has_issues:
        raise typer.Exit(code=1)
