"""
Cursor context detection.

Walks upward from the cursor line to find the construct the cursor sits
in. The walk is a small state machine:

    SCANNING ──line ends with "="──────────────▶ FOUND_ASSIGNMENT
        │     ──"{" with no pending "}"────────▶ FOUND_OPENER
        └─────top of file──────────────────────▶ EXHAUSTED

Every "}" seen on the way up is a debt that the next "{" pays off instead
of being treated as the enclosing opener. Braces inside string values can
fool the walk; that is accepted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class WalkState(str, Enum):
    SCANNING = "scanning"
    FOUND_ASSIGNMENT = "found_assignment"
    FOUND_OPENER = "found_opener"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class CursorContext:
    """Result of the upward walk.

    ``text`` is the normalized anchor line, used as a classification string
    (e.g. ``"clauses {"``). ``None`` when nothing non-blank was inspected.
    """

    state: WalkState
    text: str | None = None
    line: int | None = None

    def mentions(self, word: str) -> bool:
        return self.text is not None and word in self.text


def normalize_line(line: str) -> str:
    """Collapse tab and space runs to one space and trim."""
    return " ".join(line.split())


def resolve_context(lines: Sequence[str], cursor_line: int) -> CursorContext:
    """
    Find the nearest enclosing construct above ``cursor_line``.

    Reaching the top of the file without an opener yields the last
    non-blank line inspected, in the EXHAUSTED state.
    """
    if not 0 <= cursor_line < len(lines):
        return CursorContext(WalkState.EXHAUSTED)

    state = WalkState.SCANNING
    debt = 0
    anchor: str | None = None
    anchor_line: int | None = None

    for index in range(cursor_line, -1, -1):
        element = normalize_line(lines[index])
        if not element:
            continue
        anchor, anchor_line = element, index

        if element.endswith("="):
            state = WalkState.FOUND_ASSIGNMENT
            break

        if "}" in element:
            debt += 1

        # The cursor line's own "{" is not an enclosing opener
        if "{" in element and index != cursor_line:
            if debt > 0:
                debt -= 1
            else:
                state = WalkState.FOUND_OPENER
                break

    if state is WalkState.SCANNING:
        state = WalkState.EXHAUSTED

    return CursorContext(state, anchor, anchor_line)
