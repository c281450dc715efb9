"""Records describing translation units, headers and their include contexts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional


@dataclass
class HeaderIndex:
    """An index of a header: path without suffix and the hashes of its parts."""

    path: str
    symbol_hash: int = 0
    feature_hash: int = 0


@dataclass
class Context:
    """A header context: position in the header's indices and the include location id."""

    index: Optional[int] = None
    include: Optional[int] = None


@dataclass
class IncludeLocation:
    """An include directive: its line, the including location and the file name id."""

    line: Optional[int] = None
    include: Optional[int] = None
    file: Optional[int] = None


@dataclass(eq=False)
class TranslationUnit:
    """A source file with the headers and include locations it brings in."""

    src_path: str
    index_path: str = ""
    headers: set = field(default_factory=set)
    mtime: timedelta = field(default_factory=timedelta)
    locations: list[IncludeLocation] = field(default_factory=list)
    version: int = 0


@dataclass
class HeaderContext:
    tu: Optional[TranslationUnit] = None
    context: Context = field(default_factory=Context)

    def valid(self) -> bool:
        return self.tu is not None


@dataclass(eq=False)
class Header:
    """A header file, its indices and all contexts it is included in."""

    src_path: str
    active: HeaderContext = field(default_factory=HeaderContext)
    indices: list[HeaderIndex] = field(default_factory=list)
    contexts: dict[TranslationUnit, list[Context]] = field(default_factory=dict)

    def get_index(self, tu: TranslationUnit, include: int) -> Optional[int]:
        """Return the index for the context of ``tu`` at ``include``, or None."""
        for context in self.contexts.get(tu, ()):
            if context.include == include:
                return context.index
        return None