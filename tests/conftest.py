import io
import tarfile
from io import BytesIO
from typing import Iterable, Tuple, Union

import pytest

BLOCK = 512


class Trickle(io.RawIOBase):
    """A stream that returns at most a few bytes per read, like a pipe."""

    def __init__(self, data: bytes, chunk: int = 100):
        self._data = BytesIO(data)
        self._chunk = chunk

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if size < 0 or size > self._chunk:
            size = self._chunk
        return self._data.read(size)


class Unseekable(Trickle):
    def seekable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        raise io.UnsupportedOperation("seek")


class Broken(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("device error")


def pad(data: bytes) -> bytes:
    remainder = len(data) % BLOCK
    if remainder:
        data += bytes(BLOCK - remainder)
    return data


def make_header(
    name: bytes = b"file.txt",
    size: Union[int, bytes] = 0,
    typeflag: bytes = b"0",
    prefix: bytes = b"",
) -> bytes:
    """Build a ustar header block with only the fields the indexer reads."""
    if isinstance(size, int):
        size = b"%011o\0" % size
    block = bytearray(BLOCK)
    block[0 : len(name)] = name
    block[124 : 124 + len(size)] = size
    block[156:157] = typeflag
    block[257:263] = b"ustar\0"
    block[263:265] = b"00"
    block[345 : 345 + len(prefix)] = prefix
    return bytes(block)


def make_long_name(long_name: bytes) -> bytes:
    """Build a GNU long name header and its data, like GNU tar writes it."""
    data = long_name + b"\0"
    return make_header(b"././@LongLink", len(data), b"L") + pad(data)


def make_entry(name: bytes, data: bytes = b"", prefix: bytes = b"") -> bytes:
    return make_header(name, len(data), prefix=prefix) + pad(data)


END = bytes(BLOCK * 2)


def make_tarfile(
    files: Iterable[Tuple[str, bytes]], format: int = tarfile.GNU_FORMAT
) -> bytes:
    buf = BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=format) as tar:
        for name, data in files:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, BytesIO(data))
    return buf.getvalue()


def tarfile_offsets(data: bytes):
    with tarfile.open(fileobj=BytesIO(data), mode="r") as tar:
        return [(m.name, m.offset_data, m.size) for m in tar.getmembers()]


@pytest.fixture
def simple_archive() -> bytes:
    return make_entry(b"hello.txt", b"hello world\n") + make_entry(b"empty") + END
