"""
Snippet text helpers and the "insert a whole contract" scaffolds.

Snippets use the editor snippet syntax: ``${1:default}`` placeholders and
``${2|a,b,c|}`` choice sets.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .vocab import DEFAULT_VOCABULARY, Vocabulary

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def placeholder(index: int, default: str = "") -> str:
    if default:
        return f"${{{index}:{default}}}"
    return f"${{{index}}}"


def choice(index: int, values: Iterable[str]) -> str:
    return f"${{{index}|{','.join(values)}|}}"


def format_timestamp(moment: datetime) -> str:
    """``YYYY-MM-DD HH:MM:SS``, the date format the DSL accepts."""
    return moment.strftime(TIMESTAMP_FORMAT)


class SnippetBuilder:
    """Hands out tab stops in increasing order."""

    def __init__(self) -> None:
        self._next = 1

    def placeholder(self, default: str = "") -> str:
        text = placeholder(self._next, default)
        self._next += 1
        return text

    def choice(self, values: Iterable[str]) -> str:
        text = choice(self._next, values)
        self._next += 1
        return text

    def reserve(self) -> int:
        """Take the next tab stop for a placeholder that wraps later ones."""
        index = self._next
        self._next += 1
        return index


def _header(snip: SnippetBuilder, begin: datetime, due: datetime) -> list[str]:
    return [
        f"contract {snip.placeholder('contractName')} {{",
        "\tvariables {",
        "\t\t// Add variables",
        "\t}",
        "",
        "\tdates {",
        f"\t\tbeginDate = {snip.placeholder(begin.strftime('%Y-%m-%d'))} "
        f"{snip.placeholder(begin.strftime('%H:%M:%S'))}",
        f"\t\tdueDate = {snip.placeholder(due.strftime('%Y-%m-%d'))} "
        f"{snip.placeholder(due.strftime('%H:%M:%S'))}",
        "\t}",
        "",
        "\tparties {",
        f'\t\tapplication = "{snip.placeholder("application name")}"',
        f'\t\tprocess = "{snip.placeholder("process name")}"',
        "\t}",
        "",
    ]


def _clause_head(snip: SnippetBuilder, clause_types: Iterable[str], vocab: Vocabulary) -> list[str]:
    return [
        f"\t\t{snip.choice(clause_types)} {snip.placeholder('clauseName')} {{",
        f"\t\t\trolePlayer = {snip.choice(vocab.role_players)}",
        f"\t\t\toperation = {snip.choice(vocab.operations)}",
        "",
    ]


def _full_terms(snip: SnippetBuilder, vocab: Vocabulary) -> list[str]:
    return [
        "\t\t\tterms {",
        f"\t\t\t\tWeekDaysInterval({snip.choice(vocab.weekdays)} to {snip.choice(vocab.weekdays)}),",
        f"\t\t\t\tTimeInterval({snip.placeholder('00:00:00')} to {snip.placeholder('23:59:59')}),",
        f"\t\t\t\tTimeout({snip.placeholder('180')}),",
        f"\t\t\t\tMaxNumberOfOperation({snip.placeholder('0')} per {snip.choice(vocab.time_units)}),",
        f'\t\t\t\tMessageContent("{snip.placeholder("A message content")}")',
        "\t\t\t}",
        "",
    ]


def minimal_contract(
    begin: datetime,
    due: datetime,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """A contract with one empty clause."""
    snip = SnippetBuilder()
    lines = _header(snip, begin, due)
    lines.append("\tclauses {")
    lines.extend(_clause_head(snip, vocab.clause_type_names(), vocab))
    lines.extend(
        [
            "\t\t\tterms {",
            "\t\t\t\t// Add terms",
            f"\t\t\t\t{snip.placeholder()}",
            "\t\t\t}",
            "\t\t}",
            "\t}",
            "}",
        ]
    )
    return "\n".join(lines)


def complete_contract(
    begin: datetime,
    due: datetime,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """A contract with one clause of each type, every term call filled in."""
    snip = SnippetBuilder()
    lines = _header(snip, begin, due)
    lines.append("\tclauses {")

    types = list(vocab.clause_type_names())
    for shift in range(len(types)):
        # Rotate so each clause defaults to a different type
        rotated = types[shift:] + types[:shift]
        if shift:
            lines.append("")
        lines.extend(_clause_head(snip, rotated, vocab))
        lines.extend(_full_terms(snip, vocab))
        outer = snip.reserve()
        log_call = f'log("{snip.placeholder("A log message")}")'
        lines.append(f"\t\t\tonBreach({placeholder(outer, log_call)})")
        lines.append("\t\t}")

    lines.extend(["\t}", "}"])
    return "\n".join(lines)
