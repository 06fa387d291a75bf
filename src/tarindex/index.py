from pathlib import Path
from typing import BinaryIO, List

from .parse.walker import EntryRecord, walk_archive


def index_stream(stream: BinaryIO) -> List[EntryRecord]:
    return list(walk_archive(stream))


def index_path(path: Path) -> List[EntryRecord]:
    with path.open("rb") as f:
        return index_stream(f)
