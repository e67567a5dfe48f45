"""Page cache miss hook: read one block of a table from the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aria_s3 import envelope, header
from aria_s3.client import StoreClient
from aria_s3.errors import (
    AriaS3Error,
    BlockReadError,
    CorruptDescriptorError,
    ObjectNotFoundError,
    TableNotFoundError,
)
from aria_s3.naming import FileKind, TableId, block_number_for_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreTable:
    """Geometry of a store-resident table, read from its descriptor object."""

    table: TableId
    block_size: int
    big_block_size: int
    header_size: int
    compression: int
    index_file_size: int
    data_file_size: int

    @property
    def head_blocks(self) -> int:
        """Leading index pages kept in the descriptor rather than in block objects."""
        return self.header_size // self.block_size

    @property
    def page_shift(self) -> int:
        return self.block_size.bit_length() - 1

    def head_blocks_for(self, kind: FileKind) -> int:
        return self.head_blocks if kind == FileKind.INDEX else 0

    @classmethod
    def from_descriptor(cls, table: TableId, descriptor: bytes) -> StoreTable:
        problem = header.descriptor_problem(descriptor)
        if problem is not None:
            raise CorruptDescriptorError(table.descriptor_name, problem)
        cap = header.read_capabilities(descriptor)
        problem = header.geometry_problem(cap)
        if problem is not None:
            raise CorruptDescriptorError(table.descriptor_name, problem)
        if cap.s3_block_size <= 0 or cap.s3_block_size % cap.block_size:
            raise CorruptDescriptorError(
                table.descriptor_name,
                f"object block size {cap.s3_block_size} is not a multiple of {cap.block_size}",
            )
        index_size, data_size = header.read_file_sizes(descriptor)
        return cls(
            table=table,
            block_size=cap.block_size,
            big_block_size=cap.s3_block_size,
            header_size=cap.header_size,
            compression=cap.compression,
            index_file_size=index_size,
            data_file_size=data_size,
        )


def read_index_header(conn: StoreClient, table: TableId) -> bytes:
    """Fetch the descriptor object (the first page of the index file)."""
    try:
        return conn.get(table.bucket, table.descriptor_name)
    except ObjectNotFoundError as e:
        raise TableNotFoundError(table.database, table.table) from e


def open_store_table(conn: StoreClient, table: TableId) -> StoreTable:
    return StoreTable.from_descriptor(table, read_index_header(conn, table))


def fetch_block(
    conn: StoreClient, store_table: StoreTable, kind: FileKind, page_number: int
) -> bytes:
    """Return the block starting at ``page_number`` of the index or data file.

    ``conn`` is the caller's own connection. Every failure reaches the page
    cache as a ``BlockReadError``.
    """
    table = store_table.table
    block_number = block_number_for_page(
        page_number,
        store_table.head_blocks_for(kind),
        store_table.page_shift,
        store_table.big_block_size,
    )
    name = table.object_name(kind, block_number)
    try:
        raw = conn.get(table.bucket, name)
        return envelope.decode(raw, bool(store_table.compression), name)
    except AriaS3Error as e:
        logger.warning("s3 block read failed: %s kind=%s error=%s", name, e.kind.value, e)
        raise BlockReadError(name, e) from e


class BlockFetcher:
    """Miss hook bound to one caller's connection and one open table."""

    def __init__(self, conn: StoreClient, store_table: StoreTable) -> None:
        self.conn = conn
        self.store_table = store_table

    def __call__(self, kind: FileKind, page_number: int) -> bytes:
        return fetch_block(self.conn, self.store_table, kind, page_number)
