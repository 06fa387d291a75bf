"""Walk the headers of a TAR stream, and index the entries.

Entry data is never read. After each header, the stream is moved past the
block-aligned data region with a relative seek, so the stream must be
seekable for any archive containing non-empty entries.

Traversal stops at the end-of-archive marker (two consecutive zero blocks).
A stream that simply ends at a header position is also accepted, since
unterminated archives are common in practice. Any other malformed data
aborts the walk with a ``TarIndexParseError``; records yielded before the
error are not affected.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterator, Optional

from ..errors import (
    MalformedEntrySizeError,
    MalformedLongNameSizeError,
    TarIndexParseError,
    TruncatedLongNameDataError,
    TruncatedReadError,
    assert_between,
    assert_eq,
    assert_octal,
)
from .header import TarHeader
from .utils import BLOCK_SIZE, BlockReader, block_count, is_zero_block, zterm_decode

# the largest GNU long name accepted, in bytes
MAX_LONG_NAME = 1023
END_ZERO_BLOCKS = 2

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryRecord:
    name: str
    data_offset: int
    size: int


@dataclass
class ArchiveCursor:
    offset: int = 0
    pending_long_name: Optional[str] = None
    consecutive_zero_blocks: int = 0

    def take_long_name(self) -> Optional[str]:
        long_name = self.pending_long_name
        self.pending_long_name = None
        return long_name


class BlockKind(Enum):
    Header = 0
    Padding = 1
    EndOfArchive = 2


def classify_block(cursor: ArchiveCursor, block: bytes) -> BlockKind:
    """Track zero blocks, and decide what a block read at a header position is.

    A single zero block is skipped over as padding. The second consecutive
    zero block marks the end of the archive, and is not added to the offset.
    """
    if not is_zero_block(block):
        cursor.consecutive_zero_blocks = 0
        return BlockKind.Header

    cursor.consecutive_zero_blocks += 1
    if cursor.consecutive_zero_blocks >= END_ZERO_BLOCKS:
        return BlockKind.EndOfArchive

    cursor.offset += BLOCK_SIZE
    return BlockKind.Padding


class ArchiveWalker:
    """Index the entries of a TAR stream positioned at the start of an archive.

    The walker owns the stream for the duration of the walk; nothing else may
    read from or seek the stream in between calls to ``next_entry``.
    """

    def __init__(self, stream: BinaryIO):
        self.reader = BlockReader(stream)
        self.cursor = ArchiveCursor()
        self.done = False
        # data of the last entry, skipped when the next entry is requested
        self.skip_length = 0

    def __iter__(self) -> Iterator[EntryRecord]:
        while True:
            record = self.next_entry()
            if record is None:
                break
            yield record

    def next_entry(self) -> Optional[EntryRecord]:
        """Return the next entry, or ``None`` once the archive has ended.

        Once an error is raised, the walk is over, and later calls return
        ``None`` rather than reading from a corrupt position.

        :raises TarIndexParseError: If the archive is malformed.
        """
        if self.done:
            return None

        try:
            return self._next_entry()
        except TarIndexParseError:
            self.done = True
            raise

    def _next_entry(self) -> Optional[EntryRecord]:
        self.reader.skip(self.skip_length)
        self.cursor.offset += self.skip_length
        self.skip_length = 0

        while True:
            block = self.reader.read_block()
            if block is None:
                LOG.debug("Archive ended without marker at %d", self.cursor.offset)
                self.done = True
                return None

            kind = classify_block(self.cursor, block)
            if kind == BlockKind.EndOfArchive:
                LOG.debug("End of archive at %d", self.reader.prev)
                self.done = True
                return None
            if kind == BlockKind.Header:
                break

        header = TarHeader.from_block(block, self.reader.prev)
        self.cursor.offset += BLOCK_SIZE

        while header.is_long_name:
            # a second long name before the entry replaces the first
            self._read_long_name(header)
            block = self.reader.read_block()
            if block is None:
                raise TruncatedReadError(
                    f"header after long name: end of stream (at {self.cursor.offset})"
                )
            header = TarHeader.from_block(block, self.reader.prev)
            self.cursor.offset += BLOCK_SIZE

        return self._index_entry(header)

    def _read_long_name(self, header: TarHeader) -> None:
        location = self.reader.prev
        with assert_octal(
            "long name size", header.raw_size, location, MalformedLongNameSizeError
        ):
            length = header.size
        assert_between(
            "long name size", 1, MAX_LONG_NAME, length, location, MalformedLongNameSizeError
        )

        count = block_count(length)
        data = self.reader.read_blocks(count)
        assert_eq(
            "long name data",
            count * BLOCK_SIZE,
            len(data),
            location,
            TruncatedLongNameDataError,
        )

        long_name = zterm_decode(data[:length])
        if self.cursor.pending_long_name is not None:
            LOG.warning(
                "Long name '%s' replaced by '%s' at %d",
                self.cursor.pending_long_name,
                long_name,
                location,
            )
        LOG.debug("Long name '%s' (%d bytes) at %d", long_name, length, location)
        self.cursor.pending_long_name = long_name
        self.cursor.offset += count * BLOCK_SIZE

    def _index_entry(self, header: TarHeader) -> EntryRecord:
        location = self.reader.prev
        name = header.resolve_name(self.cursor.take_long_name())

        with assert_octal("entry size", header.raw_size, location, MalformedEntrySizeError):
            size = header.size

        data_offset = self.cursor.offset
        LOG.debug("Entry '%s', data from %d to %d", name, data_offset, data_offset + size)

        self.skip_length = block_count(size) * BLOCK_SIZE
        return EntryRecord(name, data_offset, size)


def walk_archive(stream: BinaryIO) -> Iterator[EntryRecord]:
    yield from ArchiveWalker(stream)
