"""
Outline (scope tree) recovery for Jabuti documents.

There is no parse tree. Nesting is rebuilt from keyword occurrences alone:

1. Section nodes (variables, dates, parties, clauses) hang off a single
   ``contract`` root; dates and parties get their fixed attributes.
2. Two grouping passes assign each "child" occurrence to the nearest
   preceding "main" occurrence: term calls under ``terms``, then clause
   members (including the populated ``terms`` nodes) under their clause.

Membership is purely positional, so it is only as good as the document's
ordering. A child that precedes every main occurrence is dropped rather
than attached to a later one.
"""

from __future__ import annotations

import bisect
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from .document import Position
from .scanner import (
    TokenOccurrence,
    find_all,
    find_occurrences,
    first_occurrence,
    inside_comment_or_string,
)
from .vocab import DEFAULT_VOCABULARY, SymbolKind, Vocabulary

logger = logging.getLogger(__name__)

_ASSIGNMENT = re.compile(r"(?<![\w])([A-Za-z_]\w*)[ \t]*=(?!=)")
_CLAUSE_NAME = re.compile(r"[ \t]+(\w+)")


@dataclass
class ScopeNode:
    """A node of the recovered outline."""

    label: str
    kind: SymbolKind
    position: Position
    detail: str = ""
    children: list[ScopeNode] = field(default_factory=list)

    @classmethod
    def from_occurrence(cls, occurrence: TokenOccurrence, detail: str = "") -> ScopeNode:
        return cls(
            label=occurrence.name,
            kind=occurrence.kind,
            position=occurrence.position,
            detail=detail,
        )

    def child(self, label: str) -> ScopeNode | None:
        """First direct child with ``label``."""
        return next((c for c in self.children if c.label == label), None)

    def walk(self) -> Iterator[ScopeNode]:
        """Depth-first iteration, self first."""
        yield self
        for c in self.children:
            yield from c.walk()

    def sort_children(self) -> None:
        self.children.sort(key=lambda c: c.position)


def assign_members(
    mains: list[TokenOccurrence],
    children: list[TokenOccurrence],
) -> list[tuple[TokenOccurrence, list[TokenOccurrence]]]:
    """
    Group ``children`` under the nearest preceding main occurrence.

    A child belongs to the last main whose offset is <= its own. Children
    located before the first main are left out.

    Returns:
        ``(main, members)`` pairs in ascending main offset order
    """
    ordered = sorted(mains, key=lambda occ: occ.offset)
    offsets = [occ.offset for occ in ordered]
    groups: list[tuple[TokenOccurrence, list[TokenOccurrence]]] = [(m, []) for m in ordered]

    for child in sorted(children, key=lambda occ: occ.offset):
        index = bisect.bisect_right(offsets, child.offset) - 1
        if index < 0:
            logger.debug(f"'{child.name}' at {child.position} precedes every owner, skipped")
            continue
        groups[index][1].append(child)

    return groups


def _clause_name(text: str, occurrence: TokenOccurrence) -> str:
    match = _CLAUSE_NAME.match(text, occurrence.end_offset)
    return match.group(1) if match else ""


def build_clause_nodes(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> list[ScopeNode]:
    """
    Build clause nodes with their members and term calls.

    Nodes are keyed by offset so the ``terms`` node populated in the first
    pass is the same object attached to its clause in the second.
    """
    nodes: dict[int, ScopeNode] = {}
    clause_types = set(vocab.clause_type_names())

    def node_for(occurrence: TokenOccurrence) -> ScopeNode:
        if occurrence.offset not in nodes:
            detail = _clause_name(text, occurrence) if occurrence.name in clause_types else ""
            nodes[occurrence.offset] = ScopeNode.from_occurrence(occurrence, detail)
        return nodes[occurrence.offset]

    level_nodes: list[ScopeNode] = []
    for mains, members in vocab.nesting_levels():
        main_names = {k.name for k in mains}
        main_hits = find_all(text, mains)
        member_hits = [occ for occ in find_all(text, members) if occ.name not in main_names]

        level_nodes = []
        for main, owned in assign_members(main_hits, member_hits):
            node = node_for(main)
            node.children.extend(node_for(occ) for occ in owned)
            level_nodes.append(node)

    return level_nodes


def extract_variables(
    text: str,
    variables_offset: int,
    vocab: Vocabulary = DEFAULT_VOCABULARY,
) -> list[ScopeNode]:
    """
    Variable names declared in the ``variables`` block at ``variables_offset``.

    The block runs from the first ``{`` after the keyword to the first ``}``
    after that; nested braces are not supported. One node per distinct name,
    each holding every occurrence of that name inside the block. Re-declared
    names are not flagged.
    """
    open_brace = text.find("{", variables_offset)
    if open_brace == -1:
        return []
    close_brace = text.find("}", open_brace)
    if close_brace == -1:
        return []

    names: dict[str, None] = {}
    for match in _ASSIGNMENT.finditer(text, open_brace + 1, close_brace):
        line_start = text.rfind("\n", 0, match.start()) + 1
        if inside_comment_or_string(text[line_start : match.start()]):
            continue
        names.setdefault(match.group(1))

    symbols: list[ScopeNode] = []
    for name in names:
        hits = find_occurrences(
            text, name, SymbolKind.VARIABLE, start=open_brace + 1, end=close_brace
        )
        if not hits:
            continue
        symbol = ScopeNode.from_occurrence(hits[0])
        symbol.children = [ScopeNode.from_occurrence(occ) for occ in hits]
        symbols.append(symbol)

    logger.debug(f"{vocab.variables_section}: {len(symbols)} distinct names")
    return symbols


def build_scope_tree(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> list[ScopeNode]:
    """
    Recover the outline of a Jabuti document.

    A ``contract`` root is always emitted for non-blank text, anchored at
    (0, 0) when the keyword itself is missing.

    Returns:
        ``[root]``, or ``[]`` for blank text
    """
    if not text.strip():
        return []

    root_hit = first_occurrence(text, vocab.root.name, vocab.root.kind)
    root = ScopeNode(
        label=vocab.root.name,
        kind=vocab.root.kind,
        position=root_hit.position if root_hit else Position(0, 0),
    )

    for section in vocab.sections:
        hit = first_occurrence(text, section.name, section.kind)
        if hit is None:
            continue
        node = ScopeNode.from_occurrence(hit)

        if section.name == vocab.variables_section:
            node.children.extend(extract_variables(text, hit.offset, vocab))

        for attribute in vocab.section_attributes.get(section.name, ()):
            attr_hit = first_occurrence(text, attribute.name, attribute.kind, start=hit.offset)
            if attr_hit is not None:
                node.children.append(ScopeNode.from_occurrence(attr_hit))
        node.sort_children()

        if section.name == vocab.clause_section:
            node.children.extend(build_clause_nodes(text, vocab))

        root.children.append(node)

    root.sort_children()
    return [root]
