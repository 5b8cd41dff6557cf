"""Shared CLI options."""

from __future__ import annotations

import typer

OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
NameOption = typer.Option("", "--name", help="Name of distribution, e.g. 1.9.0-istio-v0")
VersionOption = typer.Option(
    "", "--version", help="Version of istioctl, e.g. 1.7.4 or 1.7. Ignored when --name is set.",
)
FlavorOption = typer.Option(
    "", "--flavor", help="Flavor of istioctl: tetrate, tetratefips or istio. Ignored when --name is set.",
)
FlavorVersionOption = typer.Option(
    -1, "--flavor-version", help="Version of the flavor, e.g. 1. Ignored when --name is set.",
)
