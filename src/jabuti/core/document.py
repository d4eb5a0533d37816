"""
Immutable document snapshot shared by the analysis components.

Every editor request works on its own snapshot; nothing is cached between
requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based (line, column) location."""

    line: int
    column: int


@dataclass(frozen=True)
class DocumentSnapshot:
    """Full text plus its line-split view."""

    text: str
    lines: tuple[str, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.text.split("\n")))

    def line(self, index: int) -> str:
        """Return line ``index``, or an empty string when out of range."""
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""

    def end_position(self) -> Position:
        """Position just past the last character."""
        return Position(len(self.lines) - 1, len(self.lines[-1]))
