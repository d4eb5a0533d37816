"""
Jabuti Language Server implementation using pygls.

Every request is answered from the current text of the document alone;
the analysis functions in :mod:`jabuti.core` do the work and this module
only converts between their results and LSP types.
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_HOVER,
    Command,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DefinitionParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    DocumentFormattingParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    InitializeParams,
    InsertTextFormat,
    Location,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from jabuti import __version__
from jabuti.core.completion import CompletionSuggester, Suggestion
from jabuti.core.errors import ConfigError
from jabuti.core.formatter import DocumentEdit, format_document
from jabuti.core.hover import HoverInfo, HoverResolver
from jabuti.core.manifest import Settings, find_settings
from jabuti.core.navigation import WordRange, find_definition
from jabuti.core.scope_tree import ScopeNode, build_scope_tree

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TRIGGER_CHARACTERS = ["(", " ", "="]

RETRIGGER_COMMAND = Command(
    title="Re-trigger completions...",
    command="editor.action.triggerSuggest",
)


class JabutiLanguageServer(LanguageServer):
    """Language server holding the workspace settings."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.workspace_root: Optional[Path] = None
        self.settings = Settings()

    def suggester(self) -> CompletionSuggester:
        return CompletionSuggester(due_date_offset=self._due_date_offset())

    def hover_resolver(self) -> HoverResolver:
        return HoverResolver(due_date_offset=self._due_date_offset())

    def _due_date_offset(self) -> timedelta:
        return timedelta(hours=self.settings.completion.due_date_offset_hours)


# Create server instance
server = JabutiLanguageServer("jabuti-lsp", f"v{__version__}")


# ----------------------------------------------------------------------
# Conversions to LSP types
# ----------------------------------------------------------------------


def word_range_to_lsp(found: WordRange) -> Range:
    return Range(
        start=Position(line=found.line, character=found.start),
        end=Position(line=found.line, character=found.end),
    )


def to_document_symbol(node: ScopeNode) -> DocumentSymbol:
    """Convert an outline node (and its subtree) to a DocumentSymbol."""
    start = Position(line=node.position.line, character=node.position.column)
    end = Position(line=node.position.line, character=node.position.column + len(node.label))
    range_ = Range(start=start, end=end)
    return DocumentSymbol(
        name=node.label,
        detail=node.detail or None,
        kind=SymbolKind[node.kind.value],
        range=range_,
        selection_range=range_,
        children=[to_document_symbol(c) for c in node.children],
    )


def to_completion_item(suggestion: Suggestion) -> CompletionItem:
    is_snippet = suggestion.insert_text is not None
    return CompletionItem(
        label=suggestion.label,
        kind=CompletionItemKind[suggestion.kind.value],
        detail=suggestion.detail,
        insert_text=suggestion.insert_text,
        insert_text_format=InsertTextFormat.Snippet if is_snippet else None,
        command=RETRIGGER_COMMAND if suggestion.retrigger else None,
    )


def to_hover(info: HoverInfo) -> Hover:
    return Hover(
        contents=MarkupContent(kind=MarkupKind(info.format.value), value=info.value),
        range=word_range_to_lsp(info.range),
    )


def to_text_edits(edit: Optional[DocumentEdit]) -> List[TextEdit]:
    if edit is None:
        return []
    range_ = Range(
        start=Position(line=edit.start.line, character=edit.start.column),
        end=Position(line=edit.end.line, character=edit.end.column),
    )
    return [TextEdit(range=range_, new_text=edit.new_text)]


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------


@server.feature(INITIALIZE)
def initialize(ls: JabutiLanguageServer, params: InitializeParams):
    """Initialize the language server."""
    if params.root_uri:
        ls.workspace_root = Path(to_fs_path(params.root_uri))
        logger.info(f"Workspace root: {ls.workspace_root}")
        _load_settings(ls)


def _load_settings(ls: JabutiLanguageServer):
    """Load jabuti.toml from the workspace root, falling back to defaults."""
    if not ls.workspace_root:
        return

    try:
        ls.settings = find_settings(ls.workspace_root)
    except ConfigError as e:
        logger.error(f"Ignoring settings: {e}")
        ls.settings = Settings()

    logging.getLogger("jabuti").setLevel(ls.settings.server.log_level)
    if ls.settings.path:
        logger.info(f"Loaded settings from {ls.settings.path}")


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: JabutiLanguageServer, params: DidOpenTextDocumentParams):
    """Handle document open."""
    logger.info(f"Opened: {params.text_document.uri}")


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: JabutiLanguageServer, params: DidChangeTextDocumentParams):
    """Handle document change."""
    logger.debug(f"Changed: {params.text_document.uri}")


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: JabutiLanguageServer, params: DidSaveTextDocumentParams):
    """Handle document save."""
    logger.info(f"Saved: {params.text_document.uri}")
    if ls.workspace_root and params.text_document.uri.endswith("jabuti.toml"):
        _load_settings(ls)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: JabutiLanguageServer, params: DidCloseTextDocumentParams):
    """Handle document close."""
    logger.info(f"Closed: {params.text_document.uri}")


# ----------------------------------------------------------------------
# Features
# ----------------------------------------------------------------------


def _source(ls: JabutiLanguageServer, uri: str) -> str:
    return ls.workspace.get_text_document(uri).source


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: JabutiLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Provide keyword documentation for the token under the cursor."""
    try:
        text = _source(ls, params.text_document.uri)
        info = ls.hover_resolver().hover(text, params.position.line, params.position.character)
    except Exception as e:
        logger.error(f"Error computing hover: {e}")
        return None
    return to_hover(info) if info else None


@server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: JabutiLanguageServer, params: DefinitionParams) -> Optional[Location]:
    """Jump from a party role reference to its declaration in the same document."""
    uri = params.text_document.uri
    try:
        text = _source(ls, uri)
        found = find_definition(text, params.position.line, params.position.character)
    except Exception as e:
        logger.error(f"Error finding definition: {e}")
        return None
    if found is None:
        return None
    return Location(uri=uri, range=word_range_to_lsp(found))


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
)
def completion(ls: JabutiLanguageServer, params: CompletionParams) -> CompletionList:
    """Provide context-aware completion suggestions."""
    items: List[CompletionItem] = []
    try:
        text = _source(ls, params.text_document.uri)
        suggestions = ls.suggester().suggest(text, params.position.line, params.position.character)
        items = [to_completion_item(s) for s in suggestions]
    except Exception as e:
        logger.error(f"Error computing completions: {e}")

    return CompletionList(is_incomplete=False, items=items)


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: JabutiLanguageServer, params: DocumentSymbolParams) -> List[DocumentSymbol]:
    """Provide the document outline."""
    try:
        text = _source(ls, params.text_document.uri)
        return [to_document_symbol(node) for node in build_scope_tree(text)]
    except Exception as e:
        logger.error(f"Error building outline: {e}")
        return []


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: JabutiLanguageServer, params: DocumentFormattingParams) -> List[TextEdit]:
    """Replace the whole document with its canonical form."""
    try:
        text = _source(ls, params.text_document.uri)
        edit = format_document(text, ls.settings.format.indent_size)
    except Exception as e:
        logger.error(f"Error formatting document: {e}")
        return []
    return to_text_edits(edit)


def start_server():
    """Start the Jabuti LSP server."""
    logger.info("Starting Jabuti Language Server...")
    server.start_io()


if __name__ == "__main__":
    start_server()
