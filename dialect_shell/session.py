"""Per-session state owned by the REPL."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SessionState:
    """Active database and display mode of one interactive session.

    Instances are immutable; the dispatcher returns a new state instead of
    mutating the one it was given.
    """

    active_database: Optional[str] = None
    expanded: bool = False

    def with_database(self, name: str) -> "SessionState":
        return replace(self, active_database=name)

    def toggle_expanded(self) -> "SessionState":
        return replace(self, expanded=not self.expanded)

    @property
    def database_label(self) -> str:
        """Database name for prompts, '(none)' when unset."""
        if self.active_database:
            return self.active_database
        return "(none)"
