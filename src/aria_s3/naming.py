"""Object naming and page-to-block arithmetic for tables stored in S3.

A table ``db.t`` is stored in its bucket as::

    db/t/aria            first header_size bytes of the index file
    db/t/frm             schema file (optional)
    db/t/index/000001    index file, block_size chunks after the header
    db/t/data/000001     data file, block_size chunks from offset 0

Block numbers start at 1 and are zero padded to 6 digits. Larger numbers
are written at their natural width.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SUFFIX_WIDTH = 6
DESCRIPTOR_SUFFIX = "aria"
SCHEMA_SUFFIX = "frm"


class FileKind(str, Enum):
    """Local file a block belongs to."""

    INDEX = "index"
    DATA = "data"


def block_suffix(block_number: int) -> str:
    """Zero-padded decimal suffix; never truncates numbers wider than 6 digits."""
    return f"{block_number:0{SUFFIX_WIDTH}d}"


def table_path(database: str, table: str) -> str:
    return f"{database}/{table}"


def descriptor_name(database: str, table: str) -> str:
    return f"{table_path(database, table)}/{DESCRIPTOR_SUFFIX}"


def schema_name(database: str, table: str) -> str:
    return f"{table_path(database, table)}/{SCHEMA_SUFFIX}"


def block_prefix(database: str, table: str, kind: FileKind | str) -> str:
    """Listing prefix shared by all block objects of one file kind."""
    return f"{table_path(database, table)}/{FileKind(kind).value}/"


def object_name(database: str, table: str, kind: FileKind | str, block_number: int) -> str:
    """Name of block ``block_number`` of the index or data file."""
    if block_number < 1:
        raise ValueError(f"Block numbers start at 1, got {block_number}")
    return f"{block_prefix(database, table, kind)}{block_suffix(block_number)}"


def block_number_for_page(
    page_number: int, head_blocks: int, page_shift: int, big_block_size: int
) -> int:
    """Return the 1-based block holding ``page_number``.

    ``page_number`` must address the first page of a block; the page cache only
    misses on block-aligned regions.
    """
    if page_number < head_blocks:
        raise ValueError(f"Page {page_number} lies inside the {head_blocks} head blocks")
    offset = (page_number - head_blocks) << page_shift
    if offset % big_block_size:
        raise ValueError(
            f"Page {page_number} is not aligned to a {big_block_size} byte block"
        )
    return offset // big_block_size + 1


@dataclass(frozen=True)
class TableId:
    """Identity of a table footprint in the store."""

    bucket: str
    database: str
    table: str

    def __str__(self) -> str:
        return f"{self.database}.{self.table}"

    @property
    def descriptor_name(self) -> str:
        return descriptor_name(self.database, self.table)

    @property
    def schema_name(self) -> str:
        return schema_name(self.database, self.table)

    def block_prefix(self, kind: FileKind | str) -> str:
        return block_prefix(self.database, self.table, kind)

    def object_name(self, kind: FileKind | str, block_number: int) -> str:
        return object_name(self.database, self.table, kind, block_number)
