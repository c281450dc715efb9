"""Option records for the server, cache, index and per-file rules."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ServerOptions:
    compile_commands_dirs: list[str] = field(default_factory=list)


@dataclass
class CacheOptions:
    dir: str = ""
    limit: int = 0

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError("cache limit must not be negative")


@dataclass
class IndexOptions:
    dir: str = ""
    implicit_instantiation: bool = True


@dataclass
class Rule:
    """Command adjustments for files whose path matches ``pattern``."""

    pattern: str = ""
    append: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)
    readonly: str = ""
    header: str = ""
    context: list[str] = field(default_factory=list)