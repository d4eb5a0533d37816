"""
Editor intelligence for the Jabuti contract DSL.

Every analysis is a pure function of the document text; nothing is cached
between requests.
"""

from .completion import CompletionSuggester, Suggestion, SuggestionKind, suggest_completions
from .context import CursorContext, WalkState, resolve_context
from .document import DocumentSnapshot, Position
from .errors import ConfigError, ErrorContext, JabutiError
from .formatter import NORMALIZATION_RULES, DocumentEdit, format_document, format_text
from .hover import HoverInfo, HoverResolver, MarkupFormat
from .manifest import Settings, find_settings, load_settings
from .navigation import WordRange, find_definition, word_at
from .scanner import TokenOccurrence, find_occurrences
from .scope_tree import ScopeNode, build_scope_tree
from .vocab import DEFAULT_VOCABULARY, Keyword, SymbolKind, Vocabulary

__all__ = [
    "CompletionSuggester",
    "ConfigError",
    "CursorContext",
    "DEFAULT_VOCABULARY",
    "DocumentEdit",
    "DocumentSnapshot",
    "ErrorContext",
    "HoverInfo",
    "HoverResolver",
    "JabutiError",
    "Keyword",
    "MarkupFormat",
    "NORMALIZATION_RULES",
    "Position",
    "ScopeNode",
    "Settings",
    "Suggestion",
    "SuggestionKind",
    "SymbolKind",
    "TokenOccurrence",
    "Vocabulary",
    "WalkState",
    "WordRange",
    "build_scope_tree",
    "find_definition",
    "find_occurrences",
    "find_settings",
    "format_document",
    "format_text",
    "load_settings",
    "resolve_context",
    "suggest_completions",
    "word_at",
]
