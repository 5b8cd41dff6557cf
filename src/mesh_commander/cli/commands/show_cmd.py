"""mcom show - Show fetched istioctl distributions."""

from __future__ import annotations

import typer

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.cli.options import OutputOption
from mesh_commander.output.formatters import output_fetched

app = typer.Typer()


@app.callback(invoke_without_command=True)
def show(output: str = OutputOption) -> None:
    """Show the fetched istioctl distributions and the active one."""
    with handle_errors():
        ctx = load_context()
        output_fetched(ctx.store.fetched_versions(), ctx.config.distribution, output)
