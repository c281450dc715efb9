"""Cooperative tasks, synchronisation, file access and language-server data helpers."""

__version__ = "0.1.0"

__all__ = [
    "completion",
    "config",
    "filesystem",
    "folding",
    "gather",
    "include_graph",
    "protocol",
    "semantic_tokens",
    "sync",
    "tasks",
]