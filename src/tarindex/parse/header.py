"""Typed access to the fields of a ustar header block.

Only the fields needed for indexing are decoded. Modes, owners, times,
checksums and link names are skipped over by the layout.
"""
from dataclasses import dataclass
from struct import Struct
from typing import Optional

from ..errors import TarIndexInternalError, assert_eq
from .utils import BLOCK_SIZE, decode_octal, zterm_decode

# name, size, typeflag, prefix
HEADER = Struct("100s 24x 12s 20x c 188x 155s 12x")
assert HEADER.size == BLOCK_SIZE, HEADER.size

GNU_LONGNAME = b"L"


@dataclass(frozen=True)
class TarHeader:
    raw_name: bytes
    raw_size: bytes
    typeflag: bytes
    raw_prefix: bytes

    @classmethod
    def from_block(cls, block: bytes, location: int = 0) -> "TarHeader":
        assert_eq("header length", BLOCK_SIZE, len(block), location, TarIndexInternalError)
        raw_name, raw_size, typeflag, raw_prefix = HEADER.unpack(block)
        return cls(raw_name, raw_size, typeflag, raw_prefix)

    @property
    def name(self) -> str:
        return zterm_decode(self.raw_name)

    @property
    def prefix(self) -> str:
        return zterm_decode(self.raw_prefix)

    @property
    def is_long_name(self) -> bool:
        return self.typeflag == GNU_LONGNAME

    @property
    def size(self) -> int:
        """The declared data length.

        :raises ValueError: If the size field is not octal.
        """
        return decode_octal(self.raw_size)

    def resolve_name(self, long_name: Optional[str] = None) -> str:
        """Return the logical path of the entry.

        A non-empty GNU long name replaces the name entirely. Otherwise, a
        non-empty ustar prefix is joined to the name with a slash.
        """
        if long_name:
            return long_name
        prefix = self.prefix
        if prefix:
            return f"{prefix}/{self.name}"
        return self.name
