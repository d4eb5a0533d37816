"""
Canonical formatting for Jabuti documents.

Formatting runs in two phases:

1. Normalization: an ordered list of named text rules, each applied to the
   whole document. Order is part of the contract; later rules assume the
   earlier ones have run (brace spacing expects tabs to be gone, the
   ``operation`` line break expects ``=`` to be spaced already).
2. Reindentation: indentation is recomputed from brace depth, trailing
   whitespace is dropped and runs of blank lines collapse to one.

String literals are never rewritten, and only the comment-spacing rule
touches comments. Unbalanced braces are tolerated: depth never drops below
zero.
"""

from __future__ import annotations

import bisect
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from .document import DocumentSnapshot, Position
from .vocab import DEFAULT_VOCABULARY

logger = logging.getLogger(__name__)

_STRING = r'"(?:[^"\\\n]|\\.)*"'
_LINE_COMMENT = r"//[^\n]*"
_BLOCK_COMMENT = r"/\*.*?\*/"

_LITERALS = re.compile(f"{_STRING}|{_LINE_COMMENT}|{_BLOCK_COMMENT}", re.DOTALL)
_COMMENTS_ONLY = re.compile(f"({_STRING})|({_LINE_COMMENT}|{_BLOCK_COMMENT})", re.DOTALL)

_LEADING_CLOSERS = re.compile(r"^[\s}]*")


def _literal_spans(text: str) -> list[tuple[int, int]]:
    return [m.span() for m in _LITERALS.finditer(text)]


def _sub_code(pattern: re.Pattern[str], repl: str | Callable[[re.Match[str]], str], text: str) -> str:
    """``pattern.sub`` that leaves matches starting inside strings or comments alone."""
    spans = _literal_spans(text)
    starts = [start for start, _ in spans]

    def replace(match: re.Match[str]) -> str:
        index = bisect.bisect_right(starts, match.start()) - 1
        if index >= 0 and match.start() < spans[index][1]:
            return match.group(0)
        return repl(match) if callable(repl) else match.expand(repl)

    return pattern.sub(replace, text)


@dataclass(frozen=True)
class NormalizationRule:
    """One named, independently testable text rewrite."""

    name: str
    description: str
    apply: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.apply(text)


# ----------------------------------------------------------------------
# Rules, in application order
# ----------------------------------------------------------------------

_TABS = re.compile(r"\t+")


def collapse_tabs(text: str) -> str:
    # Tabs inside comments go too; strings keep theirs
    out: list[str] = []
    last = 0
    for match in re.finditer(_STRING, text):
        out.append(_TABS.sub(" ", text[last : match.start()]))
        out.append(match.group(0))
        last = match.end()
    out.append(_TABS.sub(" ", text[last:]))
    return "".join(out)


# Comparisons are matched whole so "<=", ">=" and "!=" are never split
_EQUALS = re.compile(r"[ ]*(==|!=|<=|>=|=)[ ]*")


def space_equals(text: str) -> str:
    return _sub_code(_EQUALS, r" \1 ", text)


_CALL_NAMES = "|".join(map(re.escape, DEFAULT_VOCABULARY.call_names()))
_SPACE_BEFORE_CALL = re.compile(rf"(?<!\w)({_CALL_NAMES})[ ]+\(")
_SPACE_AFTER_OPEN = re.compile(r"\([ ]+")
_SPACE_BEFORE_CLOSE = re.compile(r"[ ]+\)")


def tighten_parentheses(text: str) -> str:
    # Only known calls lose the space before "("; "x and (y)" keeps it
    text = _sub_code(_SPACE_BEFORE_CALL, r"\1(", text)
    text = _sub_code(_SPACE_AFTER_OPEN, "(", text)
    return _sub_code(_SPACE_BEFORE_CLOSE, ")", text)


_LINE_COMMENT_START = re.compile(r"^//(?=[^\s/])")
_BLOCK_COMMENT_START = re.compile(r"^/\*(?=[^\s*])")
_BLOCK_COMMENT_END = re.compile(r"(?<=[^\s*])\*/$")


def space_comments(text: str) -> str:
    def replace(match: re.Match[str]) -> str:
        comment = match.group(2)
        if comment is None:
            return match.group(0)
        if comment.startswith("//"):
            return _LINE_COMMENT_START.sub("// ", comment)
        comment = _BLOCK_COMMENT_START.sub("/* ", comment)
        return _BLOCK_COMMENT_END.sub(" */", comment)

    return _COMMENTS_ONLY.sub(replace, text)


_BRACE = re.compile(r"(?<=\S)[ ]*\{")


def space_braces(text: str) -> str:
    return _sub_code(_BRACE, " {", text)


_OPERATION_TAIL = re.compile(r"(?<!\w)(operation = \w+)\b[ ]*(?=[^\s/])")


def break_after_operation(text: str) -> str:
    return _sub_code(_OPERATION_TAIL, "\\1\n", text)


_TERMS_BLOCK = re.compile(r"(?<!\w)terms \{[^{}]*\}")
_BLANK_RUN = re.compile(r"\n(?:[ ]*\n){2,}")


def collapse_blank_lines_in_terms(text: str) -> str:
    return _sub_code(_TERMS_BLOCK, lambda m: _BLANK_RUN.sub("\n\n", m.group(0)), text)


_CLOSE_THEN_SIBLING = re.compile(r"\}[ ]*\n(?=[ ]*\w)")


def separate_sibling_blocks(text: str) -> str:
    return _sub_code(_CLOSE_THEN_SIBLING, "}\n\n", text)


NORMALIZATION_RULES: tuple[NormalizationRule, ...] = (
    NormalizationRule("collapse-tabs", "tabs become single spaces", collapse_tabs),
    NormalizationRule("space-equals", "one space around =, == and comparisons", space_equals),
    NormalizationRule(
        "tighten-parentheses", "no padding inside (...) or after a call name", tighten_parentheses
    ),
    NormalizationRule("space-comments", "one space after // and /*, one before */", space_comments),
    NormalizationRule("space-braces", "exactly one space before {", space_braces),
    NormalizationRule(
        "break-after-operation", "operation = value ends its line", break_after_operation
    ),
    NormalizationRule(
        "collapse-terms-blank-lines",
        "at most one blank line inside a terms block",
        collapse_blank_lines_in_terms,
    ),
    NormalizationRule(
        "separate-sibling-blocks",
        "blank line between a closing brace and the next declaration",
        separate_sibling_blocks,
    ),
)


def normalize(text: str, rules: tuple[NormalizationRule, ...] = NORMALIZATION_RULES) -> str:
    for rule in rules:
        text = rule(text)
    return text


# ----------------------------------------------------------------------
# Reindentation
# ----------------------------------------------------------------------


def _mask_literals(text: str) -> str:
    """Blank out strings and comments, keeping newlines so lines stay aligned."""
    return _LITERALS.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), text)


def line_depths(text: str) -> list[int]:
    """
    Brace depth used to indent each line of ``text``.

    Closing braces leading a line take effect before that line is indented;
    the rest of the line's brace balance applies from the next line on.
    """
    depths: list[int] = []
    depth = 0
    for code in _mask_literals(text).split("\n"):
        leading = _LEADING_CLOSERS.match(code).group(0).count("}")
        depth = max(0, depth - leading)
        depths.append(depth)
        net = code.count("{") - code.count("}")
        depth = max(0, depth + net + leading)
    return depths


_BLANK_LINES = re.compile(r"\n{3,}")


def reindent(text: str, indent_size: int = 2) -> str:
    lines = text.split("\n")
    out = []
    for raw, depth in zip(lines, line_depths(text)):
        stripped = raw.strip()
        out.append(" " * (indent_size * depth) + stripped if stripped else "")
    return _BLANK_LINES.sub("\n\n", "\n".join(out))


def format_text(text: str, indent_size: int = 2) -> str:
    """Canonical form of ``text``. ``format_text(format_text(x)) == format_text(x)``."""
    return reindent(normalize(text), indent_size)


@dataclass(frozen=True)
class DocumentEdit:
    """Replace ``[start, end)`` of the document with ``new_text``."""

    start: Position
    end: Position
    new_text: str


def format_document(text: str, indent_size: int = 2) -> DocumentEdit | None:
    """
    A single full-document replacement, or None when ``text`` is already
    canonical.
    """
    formatted = format_text(text, indent_size)
    if formatted == text:
        return None
    snapshot = DocumentSnapshot(text)
    logger.debug(f"Formatting replaces {len(snapshot.lines)} lines")
    return DocumentEdit(start=Position(0, 0), end=snapshot.end_position(), new_text=formatted)
