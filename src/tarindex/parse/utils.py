import logging
import re
from io import SEEK_CUR
from typing import BinaryIO, Optional

from ..errors import (
    SeekFailureError,
    TruncatedReadError,
    assert_eq,
    assert_io,
)

BLOCK_SIZE = 512
ZERO_BLOCK = bytes(BLOCK_SIZE)

# strtol-like: optional sign, then as many octal digits as there are
OCTAL_PREFIX = re.compile(rb"[+-]?[0-7]+")

LOG = logging.getLogger(__name__)


def block_count(length: int) -> int:
    """Return the number of blocks needed to hold ``length`` bytes.

    Zero or negative lengths need no blocks.
    """
    if length <= 0:
        return 0
    return (length + BLOCK_SIZE - 1) // BLOCK_SIZE


def is_zero_block(block: bytes) -> bool:
    return block == ZERO_BLOCK


def zterm(buf: bytes) -> bytes:
    """Return the data of a buffer up to the first null character, if any."""
    null_index = buf.find(b"\0")
    if null_index < 0:
        return buf
    return buf[:null_index]


def zterm_decode(buf: bytes) -> str:
    """Return a string from a UTF-8 encoded, zero-terminated buffer.

    Undecodable bytes are kept as surrogates, so the name can be encoded back
    to the exact bytes stored in the archive.
    """
    return zterm(buf).decode("utf-8", "surrogateescape")


def decode_octal(field: bytes) -> int:
    """Decode a numeric header field stored as an ASCII octal string.

    The field is read up to the first null character, and surrounding
    whitespace is ignored. A blank field is zero. Any characters following
    the leading octal digits are ignored.

    :raises ValueError: If the field does not start with an octal digit.
    """
    text = zterm(field).strip()
    if not text:
        return 0

    match = OCTAL_PREFIX.match(text)
    if not match:
        raise ValueError(f"No octal digits in {field!r}")
    return int(match.group(0), 8)


class BlockReader:
    """Read block-aligned data from a binary stream.

    ``offset`` counts the bytes read or skipped through this reader, and
    ``prev`` is the offset of the last block read.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.offset = 0
        self.prev = 0

    def _read_exact(self, length: int) -> bytes:
        # raw streams and pipes may return less than asked for
        chunks = []
        remaining = length
        while remaining > 0:
            with assert_io("read", self.offset, TruncatedReadError):
                chunk = self.stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_block(self) -> Optional[bytes]:
        """Read one block, or return ``None`` at the end of the stream.

        :raises TruncatedReadError: If only part of a block could be read.
        """
        block = self._read_exact(BLOCK_SIZE)
        if not block:
            LOG.debug("End of stream at %d", self.offset)
            return None

        assert_eq("block length", BLOCK_SIZE, len(block), self.offset, TruncatedReadError)
        self.prev = self.offset
        self.offset += BLOCK_SIZE
        return block

    def read_blocks(self, count: int) -> bytes:
        """Read ``count`` full blocks.

        A short read is reported as a ``TruncatedReadError``; callers that need
        a more specific error should compare the length themselves.
        """
        length = count * BLOCK_SIZE
        data = self._read_exact(length)
        self.prev = self.offset
        self.offset += len(data)
        return data

    def skip(self, length: int) -> None:
        """Move past ``length`` bytes without reading them.

        :raises SeekFailureError: If the stream cannot seek.
        """
        if length <= 0:
            return

        with assert_io("seek", self.offset, SeekFailureError):
            self.stream.seek(length, SEEK_CUR)
        self.prev = self.offset
        self.offset += length
