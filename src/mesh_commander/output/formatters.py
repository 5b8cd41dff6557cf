"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape

from mesh_commander.models import Advisory
from mesh_commander.models.distribution import Distribution
from mesh_commander.models.manifest import Manifest

console = Console()


def _dump(data: Any, fmt: str) -> None:
    if fmt == "json":
        console.print_json(json.dumps(data, indent=2))
    else:
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))


def output_manifest(manifest: Manifest, active: Distribution | None, fmt: str) -> None:
    if fmt in ("json", "yaml"):
        _dump(manifest.to_dict(), fmt)
    else:
        from mesh_commander.output.tables import manifest_table
        console.print(manifest_table(manifest, active))
        if active is not None:
            console.print("[dim]'*' indicates the currently active istioctl version.[/dim]")


def output_fetched(fetched: list[Distribution], active: Distribution | None, fmt: str) -> None:
    if fmt in ("json", "yaml"):
        data = [
            {"name": str(d), "group": d.group(), "active": d == active}
            for d in fetched
        ]
        _dump(data, fmt)
    elif not fetched:
        console.print("[dim]No istioctl installed yet.[/dim]")
    else:
        from mesh_commander.output.tables import fetched_table
        console.print(fetched_table(fetched, active))


def output_advisory(
    summary: list[str],
    local_warnings: list[str],
    advisory: Advisory,
    fmt: str,
) -> None:
    if fmt in ("json", "yaml"):
        data = {
            "summary": summary,
            "local_warnings": local_warnings,
            "messages": advisory.messages,
            "outcome": advisory.outcome.value,
        }
        _dump(data, fmt)
        return

    from mesh_commander.output.themes import styled_advisory, styled_outcome
    for line in summary:
        console.print(escape(line), highlight=False)
    if summary:
        console.print()
    for w in local_warnings:
        console.print(styled_advisory(w), highlight=False)
    for m in advisory.messages:
        console.print(styled_advisory(m), highlight=False)
    console.print(f"\nResult: {styled_outcome(advisory.outcome)}")
