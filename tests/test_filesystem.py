import os
from datetime import timedelta

import pytest

from clice import filesystem as afs
from clice.filesystem import FileHandle, Mode, Stats
from clice.gather import run


def test_filesystem_read(tmp_path):
    path = tmp_path / "prefix.suffix"
    path.write_bytes(b"hello")

    async def main():
        return await afs.read(path)

    assert run(main()) == (b"hello",)


def test_filesystem_write(tmp_path):
    path = tmp_path / "prefix.suffix"
    path.write_bytes(b"")

    async def main():
        await afs.write(path, b"hello")
        return await afs.read(path)

    assert run(main()) == (b"hello",)
    assert path.read_bytes() == b"hello"


def test_write_truncates_by_default(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"a much longer text")

    async def main():
        await afs.write(path, "short")
        return await afs.read(path)

    assert run(main()) == (b"short",)
    assert path.read_bytes() == b"short"


def test_write_append(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"one")

    async def main():
        await afs.write(path, b"two", Mode.WRITE | Mode.APPEND)
        return await afs.read(path)

    assert run(main()) == (b"onetwo",)
    assert path.read_bytes() == b"onetwo"


def test_exclusive_fails_on_existing(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"x")

    async def main():
        await afs.write(path, b"y", Mode.WRITE | Mode.CREATE | Mode.EXCLUSIVE)

    with pytest.raises(FileExistsError):
        run(main())


def test_read_missing_file(tmp_path):
    async def main():
        return await afs.read(tmp_path / "missing")

    with pytest.raises(FileNotFoundError):
        run(main())


def test_handle_read_in_chunks(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"abcdef")

    async def main():
        with await afs.open_file(path, Mode.READ) as handle:
            first = await handle.read(4)
            second = await handle.read(4)
            third = await handle.read(4)
        return first, second, third

    ((first, second, third),) = run(main())
    assert (first, second, third) == (b"abcd", b"ef", b"")


def test_handle_write_and_close(tmp_path):
    path = tmp_path / "file.txt"

    async def main():
        handle = await afs.open_file(path, Mode.WRITE | Mode.CREATE)
        await handle.write(b"data")
        handle.close()
        return handle

    (handle,) = run(main())
    assert path.read_bytes() == b"data"
    assert handle.fd == -1


def test_closed_handle_rejects_read(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"x")
    handle = FileHandle(os.open(path, os.O_RDONLY))
    handle.close()

    async def main():
        await handle.read(1)

    with pytest.raises(ValueError):
        run(main())


def test_stat_mtime(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"x")

    async def main():
        return await afs.stat(path)

    (stats,) = run(main())
    expected = os.stat(path).st_mtime_ns // 1_000_000
    assert stats == Stats(mtime=timedelta(milliseconds=expected))
    assert stats.mtime // timedelta(milliseconds=1) == expected