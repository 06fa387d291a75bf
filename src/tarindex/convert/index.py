"""Write TAR indexes as text lines or as a JSON manifest.

Each text line is ``<name> <data_offset> <size>``. Names are written as
stored, so a name containing spaces is not escaped.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, List, TextIO

from pydantic import BaseModel, RootModel

from ..parse.walker import EntryRecord

LOG = logging.getLogger(__name__)


class IndexEntryInfo(BaseModel):
    name: str
    data_offset: int
    size: int

    @classmethod
    def from_record(cls, record: EntryRecord) -> IndexEntryInfo:
        # JSON is text, undecodable bytes in names are replaced
        name = record.name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
        return cls(name=name, data_offset=record.data_offset, size=record.size)

    def to_record(self) -> EntryRecord:
        return EntryRecord(name=self.name, data_offset=self.data_offset, size=self.size)


class IndexManifest(RootModel[List[IndexEntryInfo]]):
    @classmethod
    def from_records(cls, records: Iterable[EntryRecord]) -> IndexManifest:
        return cls([IndexEntryInfo.from_record(record) for record in records])


def format_record(record: EntryRecord) -> bytes:
    # names may hold undecodable bytes from the archive, write them back as-is
    name = record.name.encode("utf-8", "surrogateescape")
    return b"%s %d %d\n" % (name, record.data_offset, record.size)


def write_index_lines(f: BinaryIO, records: Iterable[EntryRecord]) -> int:
    count = 0
    for record in records:
        f.write(format_record(record))
        count += 1
    LOG.debug("Wrote %d index lines", count)
    return count


def write_index_json(f: TextIO, records: Iterable[EntryRecord]) -> int:
    manifest = IndexManifest.from_records(records)
    f.write(manifest.model_dump_json(indent=2))
    f.write("\n")
    count = len(manifest.root)
    LOG.debug("Wrote %d index entries", count)
    return count
