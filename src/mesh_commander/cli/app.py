"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

app = typer.Typer(
    name="mcom",
    help="Mesh Commander - Lifecycle management for trusted Istio distributions.",
    no_args_is_help=True,
)


@app.callback()
def root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _register_commands() -> None:
    from mesh_commander.cli.commands.list_cmd import app as list_app
    from mesh_commander.cli.commands.fetch_cmd import app as fetch_app
    from mesh_commander.cli.commands.switch_cmd import app as switch_app
    from mesh_commander.cli.commands.prune_cmd import app as prune_app
    from mesh_commander.cli.commands.show_cmd import app as show_app
    from mesh_commander.cli.commands.check_upgrade_cmd import app as check_upgrade_app
    from mesh_commander.cli.commands.version_cmd import app as version_app
    from mesh_commander.cli.commands.default_hub_cmd import app as default_hub_app
    from mesh_commander.cli.commands.istioctl_cmd import CONTEXT_SETTINGS, istioctl

    app.add_typer(list_app, name="list", help="List available Istio distributions")
    app.add_typer(fetch_app, name="fetch", help="Fetch istioctl of a given distribution")
    app.add_typer(switch_app, name="switch", help="Switch the active istioctl")
    app.add_typer(prune_app, name="prune", help="Remove fetched istioctl distributions")
    app.add_typer(show_app, name="show", help="Show fetched istioctl distributions")
    app.add_typer(check_upgrade_app, name="check-upgrade", help="Check the running mesh for patches")
    app.add_typer(version_app, name="version", help="Show mcom, cluster and istioctl versions")
    app.add_typer(default_hub_app, name="default-hub", help="Set or show the default image hub")
    app.command("istioctl", context_settings=CONTEXT_SETTINGS, help="Execute the active istioctl")(istioctl)


_register_commands()


def main() -> None:
    app()
