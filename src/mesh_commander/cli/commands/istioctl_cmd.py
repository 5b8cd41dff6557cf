"""mcom istioctl <args...> - Run the active istioctl."""

from __future__ import annotations

import logging

import typer

from mesh_commander.cli.context import handle_errors, load_context
from mesh_commander.core.manifest_checker import check_before_install
from mesh_commander.core.manifest_fetcher import fetch_manifest
from mesh_commander.core.resolve import istioctl_args

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


def istioctl(ctx: typer.Context) -> None:
    """Execute istioctl with the given arguments, e.g. "mcom istioctl install --set profile=demo"."""
    with handle_errors():
        cmd_ctx = load_context()
        active = cmd_ctx.config.distribution
        cmd_ctx.store.require(active)

        args = istioctl_args(list(ctx.args), cmd_ctx.config.default_hub)
        if "install" in args:
            for warning in check_before_install(active, fetch_manifest()):
                logger.warning(warning)

        cmd_ctx.store.run(active, args)
