"""Per-session state accumulated from SETTITLE/SETDESC."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SessionState:
    """What the picker gets to show: a title and a description.

    Instances are immutable; the dispatcher replaces the state instead of
    mutating it, and RESET simply returns a fresh ``SessionState()``.
    """

    title: Optional[str] = None
    description: Optional[str] = None

    def with_title(self, title: str) -> "SessionState":
        return replace(self, title=title)

    def with_description(self, description: str) -> "SessionState":
        return replace(self, description=description)
