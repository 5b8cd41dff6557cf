"""mcom fetch - Download an istioctl distribution and make it active."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import FlavorOption, FlavorVersionOption, NameOption, VersionOption
from mesh_commander.core.manifest_fetcher import fetch_manifest
from mesh_commander.core.resolve import resolve_fetch_target

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def fetch(
    name: str = NameOption,
    version: str = VersionOption,
    flavor: str = FlavorOption,
    flavor_version: int = FlavorVersionOption,
) -> None:
    """Fetch istioctl of the given version, flavor and flavor version.

    Without --flavor the "tetrate" flavor is used. An x.y version falls back
    to the latest patch in that minor version, and a missing --flavor-version
    to the latest flavor version.
    """
    with handle_errors():
        ctx = load_context()
        manifest = fetch_manifest()
        target = resolve_fetch_target(
            manifest, name=name, version=version, flavor=flavor, flavor_version=flavor_version,
        )

        with console.status(f"[bold cyan]Fetching {target}…"):
            entry = ctx.store.fetch(target, manifest)

        if entry.release_notes:
            console.print(f"For more information about {target}, please refer to the release notes:")
            for note in entry.release_notes:
                console.print(f"- {escape(note)}", highlight=False)

        ctx.store.require(target)
        ctx.save(ctx.config.with_distribution(target))
        console.print(f"[green]istioctl switched to {target} now[/green]")
