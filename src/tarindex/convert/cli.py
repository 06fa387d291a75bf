"""Index a TAR archive without extracting it.

For every entry, the name, the byte offset of the entry's data, and the size
of the data are printed. The archive is read from standard input if no file
is given.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from ..errors import TarIndexError
from ..parse.walker import walk_archive
from .index import write_index_json, write_index_lines
from .utils import configure_debug_logging, dir_exists, path_exists

LOG = logging.getLogger(__name__)


def _index_text(stream: BinaryIO, output: Optional[Path]) -> int:
    if output is not None:
        with output.open("wb") as f:
            return write_index_lines(f, walk_archive(stream))

    try:
        return write_index_lines(sys.stdout.buffer, walk_archive(stream))
    finally:
        sys.stdout.buffer.flush()


def _index_json(stream: BinaryIO, output: Optional[Path]) -> int:
    # a manifest is only written for a complete walk
    records = list(walk_archive(stream))
    if output is not None:
        with output.open("w", encoding="utf-8") as f:
            return write_index_json(f, records)
    return write_index_json(sys.stdout, records)


def index_command(args: argparse.Namespace) -> int:
    index = _index_json if args.format == "json" else _index_text
    if args.tar_file is None:
        LOG.debug("Reading archive from standard input")
        return index(sys.stdin.buffer, args.output)

    LOG.debug("Reading archive '%s'", args.tar_file)
    with args.tar_file.open("rb") as stream:
        return index(stream, args.output)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="tarindex", description=__doc__)
    parser.add_argument(
        "tar_file",
        type=path_exists,
        default=None,
        nargs="?",
        help="TAR archive to index (default: standard input)",
    )
    parser.add_argument(
        "--format", choices=("text", "json"), default="text", help="Output format",
    )
    parser.add_argument(
        "-o", "--output", type=dir_exists, default=None, help="Output file (default: standard output)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each header read")
    args = parser.parse_args(argv)

    configure_debug_logging("DEBUG" if args.verbose else "WARNING")

    try:
        count = index_command(args)
    except (TarIndexError, OSError) as e:
        LOG.error("%s: %s", type(e).__name__, e)
        sys.exit(1)
    LOG.debug("Indexed %d entries", count)
