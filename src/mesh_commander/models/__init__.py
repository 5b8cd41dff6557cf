"""Data models for Mesh Commander."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Outcome(enum.Enum):
    CLEAN = "clean"
    ISSUES_FOUND = "issues-found"


class Plane(enum.Enum):
    DATA = "data plane"
    CONTROL = "control plane"


@dataclass
class Advisory:
    messages: list[str] = field(default_factory=list)
    outcome: Outcome = Outcome.CLEAN

    @property
    def has_issues(self) -> bool:
        return self.outcome == Outcome.ISSUES_FOUND
