"""Folding ranges over preprocessor regions, conditional branches and call parentheses."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .semantic_tokens import LocalSourceRange


class FoldingRangeKind(enum.IntEnum):
    """What a folding range covers."""

    NAMESPACE = 0
    CLASS = enum.auto()
    STRUCT = enum.auto()
    UNION = enum.auto()
    ENUM = enum.auto()
    ACCESS_SPECIFIER = enum.auto()
    FUNCTION_BODY = enum.auto()
    FUNCTION_PARAMS = enum.auto()
    LAMBDA_CAPTURE = enum.auto()
    FUNCTION_CALL = enum.auto()
    INITIALIZER = enum.auto()
    COMPOUND_STMT = enum.auto()
    CONDITION_DIRECTIVE = enum.auto()
    REGION = enum.auto()


@dataclass(frozen=True, order=True)
class FoldingRange:
    """A foldable range with its kind and the placeholder text shown when folded."""

    range: LocalSourceRange
    kind: FoldingRangeKind
    text: str = ""


class PragmaKind(enum.Enum):
    REGION = "region"
    END_REGION = "endregion"
    OTHER = "other"


@dataclass(frozen=True)
class Pragma:
    """A ``#pragma`` directive at ``offset`` with its full text."""

    kind: PragmaKind
    offset: int
    text: str = ""


class BranchKind(enum.Enum):
    IF = "if"
    IFDEF = "ifdef"
    IFNDEF = "ifndef"
    ELIF = "elif"
    ELIFDEF = "elifdef"
    ELIFNDEF = "elifndef"
    ELSE = "else"
    ENDIF = "endif"


@dataclass(frozen=True)
class Condition:
    """A conditional directive at ``offset``; ``condition_end`` is where its condition ends.

    Directives without a condition, such as ``#else``, have no ``condition_end``.
    """

    kind: BranchKind
    offset: int
    condition_end: Optional[int] = None


_OPENING_BRANCHES = frozenset(
    {BranchKind.IF, BranchKind.IFDEF, BranchKind.IFNDEF, BranchKind.ELIF, BranchKind.ELIFNDEF}
)


def spans_lines(content: str, begin: int, end: int) -> bool:
    """Return True if the text between ``begin`` and ``end`` contains a line break."""
    if not 0 <= begin <= end <= len(content):
        raise ValueError(
            f"range [{begin}, {end}) is outside the content of length {len(content)}"
        )
    return "\n" in content[begin:end]


def _fold(
    content: str, begin: Optional[int], end: Optional[int], kind: FoldingRangeKind, text: str
) -> Optional[FoldingRange]:
    if begin is None or end is None or begin == end:
        return None
    if not spans_lines(content, begin, end):
        return None
    return FoldingRange(LocalSourceRange(begin, end), kind, text)


def pragma_regions(pragmas: Iterable[Pragma], content: str) -> list[FoldingRange]:
    """Fold every ``#pragma region`` with its matching ``#pragma endregion``."""
    stack: list[Pragma] = []
    result: list[FoldingRange] = []
    for pragma in pragmas:
        if pragma.kind is PragmaKind.REGION:
            stack.append(pragma)
        elif pragma.kind is PragmaKind.END_REGION and stack:
            last = stack.pop()
            folded = _fold(content, last.offset, pragma.offset, FoldingRangeKind.REGION, "")
            if folded is not None:
                result.append(folded)
    return sorted(result)


def condition_branches(conditions: Iterable[Condition], content: str) -> list[FoldingRange]:
    """Fold the branch of a conditional directive that an ``#else`` closes."""
    stack: list[Condition] = []
    result: list[FoldingRange] = []
    for condition in conditions:
        if condition.kind in _OPENING_BRANCHES:
            stack.append(condition)
        elif condition.kind is BranchKind.ELSE:
            if stack:
                last = stack.pop()
                folded = _fold(
                    content,
                    last.condition_end,
                    condition.offset,
                    FoldingRangeKind.CONDITION_DIRECTIVE,
                    "",
                )
                if folded is not None:
                    result.append(folded)
            stack.append(condition)
        elif condition.kind is BranchKind.ENDIF:
            if stack:
                stack.pop()
    return sorted(result)


def call_parentheses(tokens: Sequence[tuple[str, int]]) -> Optional[tuple[int, int]]:
    """Find the argument parentheses of a call from its ``(kind, offset)`` tokens.

    The call must end in ``r_paren``; the offsets of the matching ``l_paren`` and
    of that final ``r_paren`` are returned, or None when there is no match.
    """
    if not tokens or tokens[-1][0] != "r_paren":
        return None
    right = tokens[-1][1]
    depth = 0
    for kind, offset in reversed(tokens):
        if kind == "r_paren":
            depth += 1
        elif kind == "l_paren":
            depth -= 1
            if depth == 0:
                return offset, right
    return None