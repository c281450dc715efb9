"""Language Server Protocol structures used by the server, with JSON conversion."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any

_UINTEGER_MAX = 2**31 - 1

DocumentUri = str
URI = str


def _check_uinteger(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= value <= _UINTEGER_MAX:
        raise ValueError(f"{name} must be in [0, {_UINTEGER_MAX}], got {value}")


@dataclass(frozen=True)
class Position:
    """A zero-based line and character offset in a document."""

    line: int
    character: int

    def __post_init__(self) -> None:
        _check_uinteger("line", self.line)
        _check_uinteger("character", self.character)


@dataclass(frozen=True)
class Range:
    """A span between two positions, end exclusive."""

    start: Position
    end: Position


@dataclass
class Location:
    uri: DocumentUri
    range: Range


@dataclass
class TextEdit:
    """Replace ``range`` with ``new_text``; an empty range inserts."""

    range: Range
    new_text: str


@dataclass
class TextDocumentItem:
    uri: DocumentUri
    language_id: str
    version: int
    text: str


@dataclass
class TextDocumentIdentifier:
    uri: DocumentUri


@dataclass
class VersionedTextDocumentIdentifier:
    uri: DocumentUri
    version: int


@dataclass
class TextDocumentPositionParams:
    text_document: TextDocumentIdentifier
    position: Position


class TextDocumentSyncKind(enum.IntEnum):
    NONE = 0
    FULL = 1
    INCREMENTAL = 2


@dataclass
class WorkspaceFolder:
    uri: URI
    name: str


class ErrorCodes(enum.IntEnum):
    """JSON-RPC and LSP error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_NOT_INITIALIZED = -32002
    UNKNOWN_ERROR_CODE = -32001
    REQUEST_FAILED = -32803
    SERVER_CANCELLED = -32802
    CONTENT_MODIFIED = -32801
    REQUEST_CANCELLED = -32800


@dataclass
class TextDocumentParams:
    text_document: TextDocumentIdentifier


@dataclass
class ResolveProvider:
    resolve_provider: bool


@dataclass
class SemanticTokenLegend:
    token_types: list[str] = field(default_factory=list)
    token_modifiers: list[str] = field(default_factory=list)


@dataclass
class SemanticTokenOptions:
    legend: SemanticTokenLegend = field(default_factory=SemanticTokenLegend)
    full: bool = True


@dataclass
class CompletionOptions:
    trigger_characters: list[str] = field(
        default_factory=lambda: [".", "<", ">", ":", '"', "/", "*"]
    )
    resolve_provider: bool = False


@dataclass
class HeaderContext:
    """A header context: the context file, its AST version and an include id."""

    file: str
    version: int
    include: int


@dataclass
class IncludeLocation:
    """The line and file of an include directive; line is None when unknown."""

    line: int | None = None
    file: str = ""


@dataclass
class HeaderContextGroup:
    index_file: str
    contexts: list[HeaderContext] = field(default_factory=list)


@dataclass
class HeaderContextSwitchParams:
    header: str
    context: HeaderContext


def _camel(name: str) -> str:
    first, *rest = name.split("_")
    return first + "".join(part.capitalize() for part in rest)


def to_json(value: Any) -> Any:
    """Convert a protocol value into JSON-compatible data with LSP field names."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (int, float)):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            _camel(f.name): to_json(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_json(item) for key, item in value.items()}
    raise TypeError(f"cannot convert {type(value).__name__} to JSON")