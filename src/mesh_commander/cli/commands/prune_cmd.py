"""mcom prune - Remove installed istioctl distributions."""

from __future__ import annotations

import typer
from rich.console import Console

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import FlavorOption, FlavorVersionOption, VersionOption
from mesh_commander.core.resolve import resolve_prune_target

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def prune(
    version: str = VersionOption,
    flavor: str = FlavorOption,
    flavor_version: int = FlavorVersionOption,
) -> None:
    """Remove a specific istioctl, or all of them except the active one."""
    with handle_errors():
        ctx = load_context()
        target = resolve_prune_target(version, flavor, flavor_version)
        removed = ctx.store.remove(target, ctx.config.distribution)

    if not removed:
        console.print("[dim]Nothing removed.[/dim]")
        return
    for d in removed:
        console.print(f"removed {d}")
