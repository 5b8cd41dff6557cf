"""Per-invocation state shared by commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from mesh_commander.config.settings import ActiveConfig, settings
from mesh_commander.core.istioctl import IstioctlStore
from mesh_commander.errors import MeshCommanderError

err_console = Console(stderr=True)


@dataclass
class CommandContext:
    store: IstioctlStore
    config: ActiveConfig

    def save(self, config: ActiveConfig) -> None:
        config.save(self.store.home_dir)
        self.config = config


def load_context() -> CommandContext:
    home = settings.home_dir
    return CommandContext(store=IstioctlStore(home), config=ActiveConfig.load(home))


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn domain errors into a red message and exit status 1."""
    try:
        yield
    except MeshCommanderError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
