"""Rich table builders for each command."""

from __future__ import annotations

from rich.table import Table

from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import Manifest
from mesh_commander.output.themes import ACTIVE_STYLE


def manifest_table(manifest: Manifest, active: Distribution | None = None) -> Table:
    table = Table(title="Istio Distributions", expand=True, show_lines=False)
    table.add_column("Istio Version", style="bold white", no_wrap=True)
    table.add_column("Flavor", style="magenta", no_wrap=True)
    table.add_column("Flavor Version", justify="right")
    table.add_column("K8s Versions", style="cyan")
    table.add_column("End of Life", style="dim", no_wrap=True)

    for e in manifest.entries:
        d = e.distribution
        version = d.version
        if active is not None and d == active:
            version = f"[{ACTIVE_STYLE}]*{version}[/{ACTIVE_STYLE}]"
        table.add_row(
            version,
            d.flavor,
            str(d.flavor_version),
            ",".join(e.k8s_versions),
            e.end_of_life.isoformat() if e.end_of_life else "",
        )
    return table


def fetched_table(fetched: list[Distribution], active: Distribution | None = None) -> Table:
    table = Table(title="Fetched istioctl", expand=False)
    table.add_column("Distribution", style="bold white", no_wrap=True)
    table.add_column("Group", style="magenta")
    table.add_column("Active", justify="center")

    for d in fetched:
        mark = f"[{ACTIVE_STYLE}]*[/{ACTIVE_STYLE}]" if d == active else ""
        table.add_row(str(d), d.group(), mark)
    return table
