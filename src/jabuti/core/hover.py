"""
Hover documentation for Jabuti keywords.

The hovered token is matched by substring against an ordered keyword list;
the first hit wins, so ``beginDate`` is listed before ``dates``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from string import Template

from .navigation import WordRange, word_at
from .snippets import format_timestamp


class MarkupFormat(str, Enum):
    """Values match lsprotocol ``MarkupKind`` values."""

    PLAINTEXT = "plaintext"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class HoverInfo:
    format: MarkupFormat
    value: str
    range: WordRange


def _example(*lines: str) -> str:
    return "\n".join(["```jabuti", *lines, "```"])


def _clause_doc(name: str, summary: str) -> str:
    return "\n".join(
        [
            summary,
            "\nExample:",
            _example(
                f"{name} clauseName {{",
                "\trolePlayer = application",
                "\toperation = push",
                "\tterms {",
                "\t\t// Add terms here",
                "\t}",
                "}",
            ),
        ]
    )


_PLAIN = MarkupFormat.PLAINTEXT
_MD = MarkupFormat.MARKDOWN

# $begin/$due (and the minute-precision $begin_short/$due_short) are filled
# with concrete dates at lookup time.
_HOVER_DOCS: tuple[tuple[str, MarkupFormat, str], ...] = (
    (
        "contract",
        _PLAIN,
        "An agreement between two or more parties who do not trust each other unguardedly. "
        "A contract can be modelled as an Event Condition Action (ECA) system where events "
        "trigger the execution of actions when certain conditions are satisfied.",
    ),
    (
        "beginDate",
        _PLAIN,
        "The begin date of the contract.\n"
        "Allowed patterns: yyyy-mm-dd HH:mm, yyyy-mm-dd HH:mm:ss\n"
        "Examples:\n$begin\n$begin_short",
    ),
    (
        "dueDate",
        _PLAIN,
        "The due date of the contract.\n"
        "Allowed patterns: yyyy-mm-dd HH:mm, yyyy-mm-dd HH:mm:ss\n"
        "Examples:\n$due\n$due_short",
    ),
    (
        "dates",
        _MD,
        "The dates of the contract.\n\nExample:\n"
        + _example("dates {", "\tbeginDate = $begin", "\tdueDate = $due", "}"),
    ),
    (
        "parties",
        _MD,
        "An entity (typically an enterprise or a human) that agrees with another to sign an "
        "agreement with clauses that stipulate terms and conditions.\n\nExample:\n"
        + _example(
            "parties {",
            '\tapplication = "application name"',
            '\tprocess = "process name"',
            "}",
        ),
    ),
    (
        "clauses",
        _MD,
        "A statement that stipulates one or more rights, obligations and prohibitions that "
        "the parties are expected to observe.\n\nExample:\n"
        + _example(
            "clauses {",
            "\tclauseType clauseName {",
            "\t\trolePlayer = application",
            "\t\toperation = push",
            "\t\tterms {",
            "\t\t\t// Add terms here",
            "\t\t}",
            "\t}",
            "}",
        ),
    ),
    ("variables", _PLAIN, "The variables of the contract."),
    ("application", _PLAIN, "The application name of the contract."),
    ("process", _PLAIN, "The process name of the contract."),
    (
        "right",
        _MD,
        _clause_doc(
            "right",
            "An action (operation) that a party can perform if it wishes to and a condition "
            "holds. The party is free to execute the action (for example, send a purchase "
            "order) but can choose not to without negative consequences for the party. The "
            "execution of a right is illegal if the party tries to execute it when the "
            "conditions are not satisfied.",
        ),
    ),
    (
        "obligation",
        _MD,
        _clause_doc(
            "obligation",
            "An action (for example, pay a bill) that a party is expected to execute to comply "
            "with the smart contract, when a condition holds. A failure to execute the action "
            "that fulfils an obligation results in penalties to be paid by the irresponsible "
            "party.",
        ),
    ),
    (
        "prohibition",
        _MD,
        _clause_doc(
            "prohibition",
            "An action that a party is not expected to execute when certain conditions hold "
            "unless it wishes to take the risk of being penalised.",
        ),
    ),
    ("rolePlayer", _PLAIN, "Defines the scope of the clause: application or process."),
    (
        "operation",
        _PLAIN,
        "Defines the type of the operation of the clause.\n"
        "Allowed values:\npush | poll | read | write | request | response",
    ),
    (
        "terms",
        _MD,
        "Used to define the rules of the service level and business level.\n\nExample:\n"
        + _example("terms {", "\t// Add terms here", "}"),
    ),
    (
        "WeekDaysInterval",
        _PLAIN,
        "A weekday interval.\nWeekDays:\n"
        "Monday | Tuesday | Wednesday | Thursday | Friday | Saturday | Sunday\n"
        "\nExample:\nWeekDaysInterval(Monday to Friday)",
    ),
    ("TimeInterval", _PLAIN, "The time interval.\n\nExample:\nTimeInterval(00:00:00 to 23:00:00)"),
    ("Timeout", _PLAIN, "The time limit, in seconds.\n\nExample:\nTimeout(180)"),
    (
        "MaxNumberOfOperation",
        _PLAIN,
        "A max number of operation.\nAllowed intervals:\n"
        "Second | Hour | Minute | Day | Week | Month\n"
        "\nExample:\nMaxNumberOfOperation(5 per Day)",
    ),
    ("MessageContent", _PLAIN, "A message content."),
    ("onBreach", _PLAIN, "Used to perform an action if there is a clause violation."),
    ("log", _PLAIN, "A log function."),
)


class HoverResolver:
    """Looks up keyword documentation for the token under the cursor."""

    def __init__(
        self,
        due_date_offset: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.due_date_offset = due_date_offset
        self.clock = clock

    def hover(self, text: str, line: int, column: int) -> HoverInfo | None:
        found = word_at(text, line, column)
        if found is None:
            return None

        for keyword, markup, template in _HOVER_DOCS:
            if keyword in found.word:
                return HoverInfo(format=markup, value=self._render(template), range=found)
        return None

    def _render(self, template: str) -> str:
        begin = format_timestamp(self.clock())
        due = format_timestamp(self.clock() + self.due_date_offset)
        return Template(template).safe_substitute(
            begin=begin,
            due=due,
            begin_short=begin[:16],
            due_short=due[:16],
        )
