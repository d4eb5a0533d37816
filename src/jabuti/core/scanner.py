"""
Keyword occurrence scanning.

Finds every position of a DSL keyword in raw document text. Matches that
fall inside a string literal or a comment on the same line are discarded.
This is the only "lexing" the editor features do.
"""

from __future__ import annotations

import bisect
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from .document import Position
from .vocab import Keyword, SymbolKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenOccurrence:
    """One hit of a keyword in the document."""

    name: str
    offset: int
    position: Position
    kind: SymbolKind = SymbolKind.FIELD

    @property
    def end_offset(self) -> int:
        return self.offset + len(self.name)


def inside_comment_or_string(prefix: str) -> bool:
    """
    True when the end of ``prefix`` lies inside a ``"..."`` literal, after
    ``//``, or inside an unterminated ``/*``.

    ``prefix`` is the text of one line up to the candidate match.
    """
    in_string = False
    in_block = False
    i = 0
    while i < len(prefix):
        pair = prefix[i : i + 2]
        if in_block:
            if pair == "*/":
                in_block = False
                i += 2
                continue
        elif in_string:
            if prefix[i] == '"':
                in_string = False
        elif pair == "//":
            return True
        elif pair == "/*":
            in_block = True
            i += 2
            continue
        elif prefix[i] == '"':
            in_string = True
        i += 1
    return in_string or in_block


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Whole identifiers only: "right" must not match inside "copyright"
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")


def _line_starts(text: str) -> list[int]:
    starts = [0]
    starts.extend(m.end() for m in re.finditer("\n", text))
    return starts


def find_occurrences(
    text: str,
    keyword: str,
    kind: SymbolKind = SymbolKind.FIELD,
    *,
    start: int = 0,
    end: int | None = None,
) -> list[TokenOccurrence]:
    """
    Find every occurrence of ``keyword`` in ``text[start:end]``.

    Offsets and positions are always relative to the whole ``text``.

    Args:
        text: Full document text
        keyword: Literal keyword to look for
        kind: Outline kind attached to each occurrence
        start: First offset to search from
        end: Offset to stop searching at (default: end of text)

    Returns:
        Occurrences in ascending offset order; empty when the keyword is absent
    """
    if not keyword:
        return []

    line_starts = _line_starts(text)
    stop = len(text) if end is None else end
    found: list[TokenOccurrence] = []

    for match in _keyword_pattern(keyword).finditer(text, start, stop):
        offset = match.start()
        if offset == 0:
            # Nothing precedes the first character
            found.append(TokenOccurrence(keyword, 0, Position(0, 0), kind))
            continue

        line = bisect.bisect_right(line_starts, offset) - 1
        line_start = line_starts[line]
        if inside_comment_or_string(text[line_start:offset]):
            continue
        found.append(TokenOccurrence(keyword, offset, Position(line, offset - line_start), kind))

    return found


def first_occurrence(
    text: str,
    keyword: str,
    kind: SymbolKind = SymbolKind.FIELD,
    *,
    start: int = 0,
) -> TokenOccurrence | None:
    """First code occurrence of ``keyword`` at or after ``start``."""
    hits = find_occurrences(text, keyword, kind, start=start)
    return hits[0] if hits else None


def find_all(text: str, keywords: Iterable[Keyword]) -> list[TokenOccurrence]:
    """Scan each keyword independently and merge the hits by offset."""
    merged: list[TokenOccurrence] = []
    for keyword in keywords:
        merged.extend(find_occurrences(text, keyword.name, keyword.kind))
    merged.sort(key=lambda occ: occ.offset)
    logger.debug(f"Scanned {len(merged)} keyword occurrences")
    return merged
