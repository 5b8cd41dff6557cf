"""Outcome and advisory color maps."""

from rich.markup import escape

from mesh_commander.models import Outcome

OUTCOME_COLORS: dict[Outcome, str] = {
    Outcome.CLEAN: "green",
    Outcome.ISSUES_FOUND: "yellow bold",
}

ACTIVE_STYLE = "bold green"


def styled_outcome(outcome: Outcome) -> str:
    color = OUTCOME_COLORS.get(outcome, "white")
    return f"[{color}]{outcome.value}[/{color}]"


def styled_advisory(raw: str) -> str:
    message = escape(raw)
    if "security upgrades" in raw or "no longer supported" in raw:
        return f"[red]{message}[/red]"
    if "is the latest version" in raw:
        return f"[green]{message}[/green]"
    if raw.startswith("[WARNING]"):
        return f"[yellow]{message}[/yellow]"
    return message
