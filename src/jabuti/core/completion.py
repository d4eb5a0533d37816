"""
Context-aware completion for Jabuti documents.

The suggester never looks at a parse tree. It decides from three cheap
signals, in priority order:

1. whether the document mentions ``contract`` at all (offer scaffolds)
2. whether the cursor sits inside the parentheses of a term call
   (offer the closed value set for the empty argument)
3. the enclosing construct found by :func:`resolve_context`
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .context import CursorContext, resolve_context
from .document import DocumentSnapshot
from .snippets import choice, complete_contract, format_timestamp, minimal_contract, placeholder
from .vocab import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class SuggestionKind(str, Enum):
    """Values match lsprotocol ``CompletionItemKind`` member names."""

    CLASS = "Class"
    FUNCTION = "Function"
    PROPERTY = "Property"
    VALUE = "Value"
    ENUM = "Enum"


class Suggestion(BaseModel):
    """A completion candidate.

    ``insert_text`` may hold snippet placeholders (``${1:x}``) and choice
    sets (``${1|a,b|}``). ``retrigger`` asks the editor to open completion
    again once the snippet is inserted.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    kind: SuggestionKind
    insert_text: str | None = None
    detail: str | None = None
    retrigger: bool = False


@dataclass(frozen=True)
class _PairedTerm:
    """A two-argument term call such as ``WeekDaysInterval(Monday to Friday)``."""

    name: str
    separator: str
    complete: re.Pattern[str]
    left: Suggestion
    right: Suggestion


def _squash(text: str) -> str:
    return _WHITESPACE.sub("", text)


def _assignment_to(name: str, text: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(name)}\s*=$", text) is not None


class CompletionSuggester:
    """Maps a cursor position in a document to completion suggestions."""

    def __init__(
        self,
        vocab: Vocabulary = DEFAULT_VOCABULARY,
        due_date_offset: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.vocab = vocab
        self.due_date_offset = due_date_offset
        self.clock = clock
        self._paired_terms = self._build_paired_terms()

    def suggest(self, text: str, line: int, column: int) -> list[Suggestion]:
        """Suggestions for the cursor at ``(line, column)`` of ``text``."""
        root = self.vocab.root.name
        if root not in text:
            return self.contract_scaffolds()

        snapshot = DocumentSnapshot(text)
        current = snapshot.line(line)
        column = max(0, min(column, len(current)))

        # Still typing the contract header
        if root in current and "{" not in current[:column]:
            return []

        right_paren = current.find(")", column)
        left_paren = current.find("(", 0, column)
        if left_paren != -1 and right_paren != -1:
            return self.term_arguments(current, column, left_paren, right_paren)

        context = resolve_context(snapshot.lines, line)
        logger.debug(f"Completion context at {line}:{column}: {context.state.value} {context.text!r}")
        return self.for_context(context)

    # ------------------------------------------------------------------
    # Context table
    # ------------------------------------------------------------------

    def for_context(self, context: CursorContext) -> list[Suggestion]:
        element = context.text
        if not element:
            return []

        vocab = self.vocab
        if context.mentions(vocab.root.name):
            return self.section_suggestions()
        if context.mentions("dates"):
            return self.date_suggestions()
        if context.mentions(vocab.clause_section):
            return self.clause_suggestions()
        if any(context.mentions(name) for name in vocab.clause_type_names()):
            return self.clause_member_suggestions()
        if context.mentions(vocab.terms.name):
            return self.term_call_suggestions()
        return self.value_suggestions(element)

    def contract_scaffolds(self) -> list[Suggestion]:
        begin = self.clock()
        due = begin + self.due_date_offset
        return [
            Suggestion(
                label=self.vocab.root.name,
                kind=SuggestionKind.CLASS,
                insert_text=minimal_contract(begin, due, self.vocab),
                detail="A sample contract",
                retrigger=True,
            ),
            Suggestion(
                label=self.vocab.root.name,
                kind=SuggestionKind.CLASS,
                insert_text=complete_contract(begin, due, self.vocab),
                detail="A complete contract",
                retrigger=True,
            ),
        ]

    def section_suggestions(self) -> list[Suggestion]:
        return [
            Suggestion(
                label="variables",
                kind=SuggestionKind.FUNCTION,
                insert_text=f"variables {{\n\t{placeholder(1)}\n}}",
            ),
            Suggestion(
                label="dates",
                kind=SuggestionKind.FUNCTION,
                insert_text=f"dates {{\n\t{placeholder(1)}\n}}",
                retrigger=True,
            ),
            Suggestion(
                label="parties",
                kind=SuggestionKind.FUNCTION,
                insert_text=(
                    "parties {\n"
                    f'\tapplication = "{placeholder(1, "Application name")}"\n'
                    f'\tprocess = "{placeholder(2, "Process name")}"\n'
                    "}"
                ),
                retrigger=True,
            ),
            Suggestion(
                label="clauses",
                kind=SuggestionKind.FUNCTION,
                insert_text=f"clauses {{\n\t{placeholder(1)}\n}}",
                retrigger=True,
            ),
        ]

    def date_suggestions(self) -> list[Suggestion]:
        value = f"{placeholder(1, '0000-00-00')} {placeholder(2, '00:00:00')}"
        return [
            Suggestion(
                label=attribute.name,
                kind=SuggestionKind.PROPERTY,
                insert_text=f"{attribute.name} = {value}",
            )
            for attribute in self.vocab.section_attributes.get("dates", ())
        ]

    def clause_suggestions(self) -> list[Suggestion]:
        return [
            Suggestion(
                label=name,
                kind=SuggestionKind.FUNCTION,
                insert_text=f"{name} {placeholder(1, 'clauseName')} {{\n\t{placeholder(2)}\n}}",
                retrigger=True,
            )
            for name in self.vocab.clause_type_names()
        ]

    def clause_member_suggestions(self) -> list[Suggestion]:
        vocab = self.vocab
        log_call = f'log("{placeholder(2)}")'
        return [
            Suggestion(
                label="rolePlayer",
                kind=SuggestionKind.PROPERTY,
                insert_text=f"rolePlayer = {choice(1, vocab.role_players)}",
            ),
            Suggestion(
                label="operation",
                kind=SuggestionKind.PROPERTY,
                insert_text=f"operation = {choice(1, vocab.operations)}",
            ),
            Suggestion(
                label="terms",
                kind=SuggestionKind.FUNCTION,
                insert_text=f"terms {{\n\t{placeholder(1)}\n}}",
                retrigger=True,
            ),
            Suggestion(
                label="onBreach",
                kind=SuggestionKind.PROPERTY,
                insert_text=f"onBreach({placeholder(1, log_call)})",
            ),
        ]

    def term_call_suggestions(self) -> list[Suggestion]:
        vocab = self.vocab
        snippets = {
            "MaxNumberOfOperation": (
                f"MaxNumberOfOperation({placeholder(1, '0')} per {choice(2, vocab.time_units)})"
            ),
            "MessageContent": f"MessageContent({placeholder(1)})",
            "WeekDaysInterval": (
                f"WeekDaysInterval({choice(1, vocab.weekdays)} to {choice(2, vocab.weekdays)})"
            ),
            "TimeInterval": f"TimeInterval({placeholder(1, '00:00:00')} to {placeholder(2, '23:59:59')})",
            "Timeout": f"Timeout({placeholder(1, '180')})",
        }
        return [
            Suggestion(label=name, kind=SuggestionKind.PROPERTY, insert_text=snippets[name])
            for name in snippets
            if name in vocab.term_call_names()
        ]

    def value_suggestions(self, element: str) -> list[Suggestion]:
        """Suggestions for the right-hand side of an attribute being typed."""
        vocab = self.vocab
        if vocab.variables_section in element:
            return [
                Suggestion(
                    label="variable",
                    kind=SuggestionKind.PROPERTY,
                    insert_text=f'{placeholder(1, "name")} = "{placeholder(2, "value")}"',
                    detail="Variable declaration",
                )
            ]

        now = self.clock()
        if _assignment_to("beginDate", element):
            return [self._date_value(now)]
        if _assignment_to("dueDate", element):
            return [self._date_value(now + self.due_date_offset)]
        if _assignment_to("application", element):
            return [
                Suggestion(
                    label="application name",
                    kind=SuggestionKind.VALUE,
                    insert_text=f'"{placeholder(1, "Application name")}"',
                )
            ]
        if _assignment_to("process", element):
            return [
                Suggestion(
                    label="process name",
                    kind=SuggestionKind.VALUE,
                    insert_text=f'"{placeholder(1, "Process name")}"',
                )
            ]
        if _assignment_to("rolePlayer", element):
            return [Suggestion(label=v, kind=SuggestionKind.ENUM) for v in vocab.role_players]
        if _assignment_to("operation", element):
            return [Suggestion(label=v, kind=SuggestionKind.ENUM) for v in vocab.operations]
        return []

    def _date_value(self, moment: datetime) -> Suggestion:
        stamp = format_timestamp(moment)
        return Suggestion(label=stamp, kind=SuggestionKind.VALUE, insert_text=placeholder(1, stamp))

    # ------------------------------------------------------------------
    # Term call arguments
    # ------------------------------------------------------------------

    def _build_paired_terms(self) -> list[_PairedTerm]:
        vocab = self.vocab
        weekday = Suggestion(
            label=vocab.weekdays[0],
            kind=SuggestionKind.PROPERTY,
            insert_text=choice(1, vocab.weekdays),
        )
        return [
            _PairedTerm(
                name="WeekDaysInterval",
                separator="to",
                complete=re.compile(r"WeekDaysInterval\(\s*\w+\s+to\s+\w+\s*\)"),
                left=weekday,
                right=weekday,
            ),
            _PairedTerm(
                name="MaxNumberOfOperation",
                separator="per",
                complete=re.compile(r"MaxNumberOfOperation\(\s*\d+\s+per\s+\w+\s*\)"),
                left=Suggestion(label="0", kind=SuggestionKind.PROPERTY),
                right=Suggestion(
                    label=vocab.time_units[0],
                    kind=SuggestionKind.PROPERTY,
                    insert_text=choice(1, vocab.time_units),
                ),
            ),
            _PairedTerm(
                name="TimeInterval",
                separator="to",
                complete=re.compile(r"TimeInterval\(\s*[\d:]+\s+to\s+[\d:]+\s*\)"),
                left=Suggestion(label="00:00:00", kind=SuggestionKind.PROPERTY),
                right=Suggestion(label="23:59:59", kind=SuggestionKind.PROPERTY),
            ),
        ]

    def term_arguments(
        self,
        line: str,
        column: int,
        left_paren: int,
        right_paren: int,
    ) -> list[Suggestion]:
        """
        Value for the empty side of a two-argument term call.

        ``left_paren``/``right_paren`` are the ``(`` before and the ``)`` at or
        after the cursor. A call whose both sides are filled gets nothing, so
        re-triggering completion inside it is harmless.
        """
        before = _squash(line[left_paren:column])
        after = _squash(line[column:right_paren])
        left_empty = not _squash(line[left_paren + 1 : column])
        right_empty = not after

        for term in self._paired_terms:
            if term.name not in line:
                continue
            if term.complete.search(line):
                return []
            if left_empty and after.startswith(term.separator):
                return [term.left]
            if right_empty and before.endswith(term.separator):
                return [term.right]

        return []


def suggest_completions(
    text: str,
    line: int,
    column: int,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> list[Suggestion]:
    """Convenience wrapper around :class:`CompletionSuggester`."""
    return CompletionSuggester(vocab).suggest(text, line, column)
