"""Semantic tokens over byte ranges of a file, and merging of overlapping results."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Iterable

CONFLICT = "Conflict"
"""The kind given to a token whose range was claimed by several kinds."""


@dataclass(frozen=True, order=True)
class LocalSourceRange:
    """A half-open range of offsets within one file."""

    begin: int
    end: int

    def __post_init__(self) -> None:
        if self.begin < 0 or self.end < 0:
            raise ValueError("range offsets must not be negative")
        if self.begin > self.end:
            raise ValueError(f"range begins after it ends: {self.begin} > {self.end}")

    def __len__(self) -> int:
        return self.end - self.begin


@dataclass(frozen=True)
class SemanticToken:
    """A highlighted range with its symbol kind and modifiers."""

    range: LocalSourceRange
    kind: Any
    modifiers: Any = 0


def resolve_conflict(last: SemanticToken, current: SemanticToken) -> SemanticToken:
    """Return ``last`` marked as a conflict after ``current`` claimed the same range."""
    if last.kind == CONFLICT:
        return last
    return dataclasses.replace(last, kind=CONFLICT)


def merge_tokens(tokens: Iterable[SemanticToken]) -> list[SemanticToken]:
    """Sort tokens by range, mark same-range clashes and join adjacent tokens of one kind."""
    merged: list[SemanticToken] = []
    for token in sorted(tokens, key=lambda t: t.range):
        if not merged:
            merged.append(token)
            continue
        last = merged[-1]
        if last.range == token.range:
            merged[-1] = resolve_conflict(last, token)
        elif last.range.end == token.range.begin and last.kind == token.kind:
            merged[-1] = dataclasses.replace(
                last, range=LocalSourceRange(last.range.begin, token.range.end)
            )
        else:
            merged.append(token)
    return merged