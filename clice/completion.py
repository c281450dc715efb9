"""Text analysis around a code-completion point."""

from __future__ import annotations

from dataclasses import dataclass

from .semantic_tokens import LocalSourceRange


def _is_identifier_continue(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _check_offset(content: str, offset: int) -> None:
    if not 0 <= offset <= len(content):
        raise ValueError(f"offset {offset} is outside the content of length {len(content)}")


@dataclass(frozen=True)
class CompletionPrefix:
    """The partial name before the cursor and the scope qualifier spelled before it."""

    name: str
    qualifier: str
    name_offset: int
    qualifier_offset: int

    @classmethod
    def parse(cls, content: str, offset: int) -> CompletionPrefix:
        """Split the text before ``offset`` into qualifier and unqualified name."""
        _check_offset(content, offset)
        end = offset
        while end > 0 and _is_identifier_continue(content[end - 1]):
            end -= 1
        name_offset = end

        while content[:end].endswith("::"):
            end -= 2
            if content[:end].endswith(":"):
                break
            while end > 0 and _is_identifier_continue(content[end - 1]):
                end -= 1

        return cls(
            name=content[name_offset:offset],
            qualifier=content[end:name_offset],
            name_offset=name_offset,
            qualifier_offset=end,
        )


def edit_range(content: str, offset: int) -> LocalSourceRange:
    """Return the range of the identifier touching ``offset`` that a completion replaces."""
    _check_offset(content, offset)
    if offset == 0:
        raise ValueError("completion offset must be past the start of the content")
    begin = offset
    while begin > 0 and _is_identifier_continue(content[begin - 1]):
        begin -= 1
    end = offset
    while end < len(content) and _is_identifier_continue(content[end]):
        end += 1
    return LocalSourceRange(begin, end)