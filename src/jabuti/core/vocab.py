"""
Keyword vocabulary of the Jabuti contract DSL.

There is no grammar behind the editor features: structure is recovered from
this fixed vocabulary plus brace counting. The tables are frozen pydantic
models so a component can be handed a different vocabulary (tests do this)
without touching module state.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SymbolKind(str, Enum):
    """Outline classification. Values match lsprotocol ``SymbolKind`` member names."""

    MODULE = "Module"
    FIELD = "Field"
    PROPERTY = "Property"
    FUNCTION = "Function"
    VARIABLE = "Variable"


class Keyword(BaseModel):
    """A DSL keyword and the outline kind its occurrences get."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: SymbolKind = SymbolKind.FIELD


def _kw(name: str, kind: SymbolKind = SymbolKind.FIELD) -> Keyword:
    return Keyword(name=name, kind=kind)


class Vocabulary(BaseModel):
    """
    Keyword tables and closed value sets.

    Nesting recovered from the tables:
        contract -> sections -> (section attributes | clause types)
        clause type -> clause members -> (terms -> term calls)
    """

    model_config = ConfigDict(frozen=True)

    root: Keyword = _kw("contract", SymbolKind.MODULE)
    variables_section: str = "variables"
    sections: tuple[Keyword, ...] = (
        _kw("variables"),
        _kw("dates"),
        _kw("parties"),
        _kw("clauses"),
    )
    section_attributes: dict[str, tuple[Keyword, ...]] = Field(
        default_factory=lambda: {
            "dates": (
                _kw("beginDate", SymbolKind.PROPERTY),
                _kw("dueDate", SymbolKind.PROPERTY),
            ),
            "parties": (
                _kw("application", SymbolKind.PROPERTY),
                _kw("process", SymbolKind.PROPERTY),
            ),
        }
    )
    clause_section: str = "clauses"
    clause_types: tuple[Keyword, ...] = (
        _kw("right"),
        _kw("obligation"),
        _kw("prohibition"),
    )
    clause_members: tuple[Keyword, ...] = (
        _kw("rolePlayer", SymbolKind.PROPERTY),
        _kw("operation", SymbolKind.PROPERTY),
        _kw("onBreach", SymbolKind.FUNCTION),
        _kw("terms"),
    )
    terms: Keyword = _kw("terms")
    term_calls: tuple[Keyword, ...] = (
        _kw("WeekDaysInterval", SymbolKind.FUNCTION),
        _kw("TimeInterval", SymbolKind.FUNCTION),
        _kw("MaxNumberOfOperation", SymbolKind.FUNCTION),
        _kw("MessageContent", SymbolKind.FUNCTION),
        _kw("Timeout", SymbolKind.FUNCTION),
    )

    # Actions callable inside onBreach(...)
    breach_actions: tuple[str, ...] = ("log",)

    # Identifiers that go-to-definition can resolve
    referenceable: tuple[str, ...] = ("application", "process")

    weekdays: tuple[str, ...] = (
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    )
    time_units: tuple[str, ...] = ("Second", "Hour", "Minute", "Day", "Week", "Month")
    role_players: tuple[str, ...] = ("application", "process")
    operations: tuple[str, ...] = ("push", "poll", "read", "write", "request", "response")

    def nesting_levels(self) -> list[tuple[tuple[Keyword, ...], tuple[Keyword, ...]]]:
        """
        (main, children) keyword groups, innermost level first.

        Term calls are grouped under ``terms`` before ``terms`` itself is
        grouped under its clause, so a clause receives fully populated terms.
        """
        return [
            ((self.terms,), self.term_calls),
            (self.clause_types, self.clause_members),
        ]

    def clause_type_names(self) -> tuple[str, ...]:
        return tuple(k.name for k in self.clause_types)

    def term_call_names(self) -> tuple[str, ...]:
        return tuple(k.name for k in self.term_calls)

    def call_names(self) -> tuple[str, ...]:
        """Identifiers written as calls: term calls, function members, breach actions."""
        members = tuple(k.name for k in self.clause_members if k.kind is SymbolKind.FUNCTION)
        return self.term_call_names() + members + self.breach_actions


DEFAULT_VOCABULARY = Vocabulary()
