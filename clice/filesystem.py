"""Asynchronous file access through the event loop's thread pool."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from .tasks import submit

_PERMISSIONS = 0o666


class Mode(enum.Flag):
    """How a file is opened."""

    READ = enum.auto()
    WRITE = enum.auto()
    READ_WRITE = enum.auto()
    CREATE = enum.auto()
    APPEND = enum.auto()
    TRUNCATE = enum.auto()
    EXCLUSIVE = enum.auto()


_WRITE_DEFAULT = Mode.WRITE | Mode.CREATE | Mode.TRUNCATE


def _os_flags(mode: Mode) -> int:
    if Mode.READ_WRITE in mode or (Mode.READ in mode and Mode.WRITE in mode):
        flags = os.O_RDWR
    elif Mode.WRITE in mode:
        flags = os.O_WRONLY
    else:
        flags = os.O_RDONLY
    if Mode.CREATE in mode:
        flags |= os.O_CREAT
    if Mode.APPEND in mode:
        flags |= os.O_APPEND
    if Mode.TRUNCATE in mode:
        flags |= os.O_TRUNC
    if Mode.EXCLUSIVE in mode:
        flags |= os.O_EXCL
    return flags | getattr(os, "O_BINARY", 0)


def _as_bytes(data: Union[bytes, bytearray, memoryview, str]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


def _read_all(fd: int) -> bytes:
    chunks = []
    while True:
        chunk = os.read(fd, 65536)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


@dataclass(frozen=True)
class Stats:
    """File status: modification time since the epoch, in whole milliseconds."""

    mtime: timedelta


class FileHandle:
    """An open file descriptor, closed on :meth:`close` or when collected."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    @property
    def fd(self) -> int:
        return self._fd

    def _check(self) -> int:
        if self._fd < 0:
            raise ValueError("operation on a closed file")
        return self._fd

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of file."""
        fd = self._check()
        return await submit(lambda: os.read(fd, size))

    async def write(self, data) -> None:
        """Write all of ``data``."""
        fd = self._check()
        payload = _as_bytes(data)
        await submit(lambda: _write_all(fd, payload))

    def close(self) -> None:
        if self._fd >= 0:
            fd, self._fd = self._fd, -1
            os.close(fd)

    def __enter__(self) -> FileHandle:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_fd", -1) >= 0:
            self.close()


async def open_file(path, mode: Mode = Mode.READ) -> FileHandle:
    """Open ``path`` with the given mode."""
    flags = _os_flags(mode)
    fd = await submit(lambda: os.open(os.fspath(path), flags, _PERMISSIONS))
    return FileHandle(fd)


async def read(path, mode: Mode = Mode.READ) -> bytes:
    """Read the whole file."""
    flags = _os_flags(mode)

    def work() -> bytes:
        fd = os.open(os.fspath(path), flags, _PERMISSIONS)
        try:
            return _read_all(fd)
        finally:
            os.close(fd)

    return await submit(work)


async def write(path, data, mode: Mode = _WRITE_DEFAULT) -> None:
    """Write ``data`` to the file, by default replacing its content."""
    flags = _os_flags(mode)
    payload = _as_bytes(data)

    def work() -> None:
        fd = os.open(os.fspath(path), flags, _PERMISSIONS)
        try:
            _write_all(fd, payload)
        finally:
            os.close(fd)

    await submit(work)


async def stat(path) -> Stats:
    """Return the status of ``path``."""
    result = await submit(lambda: os.stat(os.fspath(path)))
    return Stats(mtime=timedelta(milliseconds=result.st_mtime_ns // 1_000_000))