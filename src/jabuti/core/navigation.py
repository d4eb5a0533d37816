"""
Word-under-cursor and go-to-definition lookups.

There is no tokenizer, so a "word" is whatever lies between the nearest
spaces around the cursor. Only space characters delimit words; tabs are
removed from the result afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .document import DocumentSnapshot
from .vocab import DEFAULT_VOCABULARY, Vocabulary

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class WordRange:
    """A token on one line: ``[start, end)`` columns and its text."""

    line: int
    start: int
    end: int
    word: str


def word_range_at(line_text: str, line: int, column: int) -> WordRange | None:
    """
    The space-delimited token containing ``column`` on ``line_text``.

    Returns:
        The range, or None when the cursor is on blank space
    """
    column = max(0, min(column, len(line_text)))

    space_before = line_text.rfind(" ", 0, column)
    start = space_before + 1 if space_before > -1 else 0

    space_after = line_text.find(" ", column)
    end = space_after if space_after > -1 else len(line_text)

    word = _WHITESPACE.sub("", line_text[start:end])
    if not word:
        return None
    return WordRange(line=line, start=start, end=end, word=word)


def word_at(text: str, line: int, column: int) -> WordRange | None:
    """:func:`word_range_at` on line ``line`` of a whole document."""
    snapshot = DocumentSnapshot(text)
    if not 0 <= line < len(snapshot.lines):
        return None
    return word_range_at(snapshot.lines[line], line, column)


def find_definition(
    text: str,
    line: int,
    column: int,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> WordRange | None:
    """
    Locate the declaration of the party role under the cursor.

    Only ``application`` and ``process`` are referenceable; they are declared
    as ``application = "..."`` in the parties block. The first line whose
    whitespace-free form contains ``<word>=`` is the declaration.

    Returns:
        Range of the declaring token, or None for any other word
    """
    found = word_at(text, line, column)
    if found is None or found.word not in vocab.referenceable:
        return None

    target = f"{found.word}="
    for index, raw in enumerate(text.split("\n")):
        if target in _WHITESPACE.sub("", raw):
            start = raw.find(found.word)
            return WordRange(line=index, start=start, end=start + len(found.word), word=found.word)

    return None
