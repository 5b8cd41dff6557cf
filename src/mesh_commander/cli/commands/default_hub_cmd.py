"""mcom default-hub - Set, show or remove the default image hub."""

from __future__ import annotations

import typer
from rich.console import Console

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.errors import ResolutionError

app = typer.Typer()
console = Console()


def check_flags(set_value: str, remove: bool, show: bool) -> None:
    """Exactly one of --set, --remove and --show must be given."""
    if sum((bool(set_value), remove, show)) != 1:
        raise ResolutionError(
            'please provide exactly one of --remove, --set and --show flags for "mcom default-hub" command'
        )


@app.callback(invoke_without_command=True)
def default_hub(
    set_value: str = typer.Option("", "--set", help="Location of the hub, e.g. --set gcr.io/istio-testing"),
    remove: bool = typer.Option(False, "--remove", help="Remove the configured default hub"),
    show: bool = typer.Option(False, "--show", help="Show the current default hub"),
) -> None:
    """Manage the hub passed to "mcom istioctl install" via "--set hub="."""
    with handle_errors():
        check_flags(set_value, remove, show)
        ctx = load_context()

        if set_value:
            ctx.save(ctx.config.with_default_hub(set_value))
            console.print(f"The default hub is now set to {set_value}")
        elif remove:
            ctx.save(ctx.config.with_default_hub(""))
            console.print(
                'The default hub is removed. Now istioctl\'s default value is used for "mcom istioctl install" command'
            )
        elif ctx.config.default_hub:
            console.print(f"The current default hub is set to {ctx.config.default_hub}")
        else:
            console.print(
                'The default hub is not set yet. istioctl\'s default value is used for "mcom istioctl install" command'
            )
