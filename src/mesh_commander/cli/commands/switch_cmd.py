"""mcom switch - Switch the active istioctl."""

from __future__ import annotations

import typer
from rich.console import Console

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import FlavorOption, FlavorVersionOption, NameOption, VersionOption
from mesh_commander.core.manifest_fetcher import fetch_manifest
from mesh_commander.core.resolve import resolve_switch_target

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def switch(
    name: str = NameOption,
    version: str = VersionOption,
    flavor: str = FlavorOption,
    flavor_version: int = FlavorVersionOption,
) -> None:
    """Switch the active istioctl to an already fetched distribution.

    Flags that are not given keep the value of the active distribution.
    """
    with handle_errors():
        ctx = load_context()
        target = resolve_switch_target(
            ctx.config.distribution,
            fetch_manifest,
            name=name,
            version=version,
            flavor=flavor,
            flavor_version=flavor_version,
        )
        ctx.store.require(target)
        ctx.save(ctx.config.with_distribution(target))
        console.print(f"[green]istioctl switched to {target} now[/green]")
