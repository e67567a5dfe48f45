"""Move a whole table between local disk and the object store.

Steps run strictly in order and are never rolled back: a failure leaves the
objects or local files written by earlier steps in place, and the raised
``MigrationStepError`` names the step and the object it failed on so they can
be cleaned up by hand.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator

from aria_s3 import envelope, header
from aria_s3.client import StoreClient
from aria_s3.config import DEFAULT_BLOCK_SIZE
from aria_s3.errors import (
    AriaS3Error,
    CorruptBlockError,
    CorruptDescriptorError,
    DeleteIncompleteError,
    LocalIOError,
    MigrationStepError,
    ObjectNotFoundError,
    TableExistsError,
    TableNotFoundError,
    UnsupportedTableError,
)
from aria_s3.fetch import read_index_header
from aria_s3.local import LocalTable
from aria_s3.naming import FileKind, TableId

__all__ = [
    "MigrationResult",
    "DeleteResult",
    "ProgressCallback",
    "copy_to_store",
    "copy_from_store",
    "delete_footprint",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# The 3-byte s3_block_size header field caps the object block size.
MAX_BLOCK_SIZE = (1 << 24) - 1


@dataclass
class MigrationResult:
    """Summary of a completed copy in either direction."""

    table: str
    direction: str
    block_size: int
    compression: int
    index_blocks: int = 0
    data_blocks: int = 0
    schema_copied: bool = False
    bytes_copied: int = 0
    duration_s: float = 0.0


@dataclass
class DeleteResult:
    table: str
    index_deleted: int = 0
    data_deleted: int = 0
    schema_deleted: bool = False


@contextmanager
def _step(step: str, name: str) -> Iterator[None]:
    try:
        yield
    except MigrationStepError:
        raise
    except AriaS3Error as e:
        raise MigrationStepError(step, name, e) from e
    except OSError as e:
        raise MigrationStepError(step, name, LocalIOError(name, str(e))) from e


def _copy_file_to_store(
    conn: StoreClient,
    table: TableId,
    kind: FileKind,
    f: BinaryIO,
    start: int,
    file_end: int,
    block_size: int,
    compression: bool,
    progress: ProgressCallback | None,
) -> tuple[int, int]:
    """Upload ``f[start:]`` as numbered block objects; return (blocks, bytes)."""
    step = f"copy {kind.value} file"
    f.seek(start)
    block_number = 0
    copied = 0
    while True:
        with _step(step, getattr(f, "name", kind.value)):
            chunk = f.read(block_size)
        if not chunk:
            break
        block_number += 1
        name = table.object_name(kind, block_number)
        with _step(step, name):
            conn.put(table.bucket, name, envelope.encode(chunk, compression))
        copied += len(chunk)
        if progress is not None:
            progress(copied, file_end - start)
    return block_number, copied


def _copy_store_to_file(
    conn: StoreClient,
    table: TableId,
    kind: FileKind,
    f: BinaryIO,
    start: int,
    file_end: int,
    compression: bool,
    progress: ProgressCallback | None,
) -> tuple[int, int]:
    """Append block objects to ``f`` until it reaches ``file_end`` bytes."""
    step = f"copy {kind.value} file"
    pos = start
    block_number = 0
    while pos < file_end:
        block_number += 1
        name = table.object_name(kind, block_number)
        with _step(step, name):
            block = envelope.decode(conn.get(table.bucket, name), compression, name)
            if not block:
                raise CorruptBlockError(name, "empty block before end of file")
            f.write(block)
        pos += len(block)
        if progress is not None:
            progress(pos - start, file_end - start)
    return block_number, pos - start


def copy_to_store(
    conn: StoreClient,
    table: TableId,
    local: LocalTable,
    *,
    block_size: int | None = None,
    compression: int | None = None,
    force: bool = False,
    keep_local: bool = False,
    default_block_size: int = DEFAULT_BLOCK_SIZE,
    progress: ProgressCallback | None = None,
) -> MigrationResult:
    """Copy a local table into the store as a descriptor plus block objects.

    ``block_size`` and ``compression`` default to the values recorded in the
    table header, then to ``default_block_size`` and no compression. The block
    size is rounded down to a multiple of the table's page size. On success the
    local index and data files are removed unless ``keep_local`` is set.
    """
    started = time.monotonic()
    descriptor_name = table.descriptor_name

    if conn.exists(table.bucket, descriptor_name):
        if not force:
            raise TableExistsError(f"s3://{table.bucket}/{descriptor_name}")
        logger.info("Replacing existing table %s in s3", table)
        delete_footprint(conn, table)

    index_path = str(local.index_path)
    index_header, cap = local.read_index_header()
    if cap.transactional or cap.data_file_type != header.BLOCK_RECORD:
        raise UnsupportedTableError(
            index_path, "it should be non-transactional and should have row_format page"
        )
    problem = header.geometry_problem(cap) or header.descriptor_problem(index_header)
    if problem is not None:
        raise UnsupportedTableError(index_path, problem)

    if block_size is None:
        block_size = cap.s3_block_size or default_block_size
    if compression is None:
        compression = cap.compression
    if not 0 < block_size <= MAX_BLOCK_SIZE:
        raise ValueError(f"Block size {block_size} is outside 1..{MAX_BLOCK_SIZE}")
    block_size = (block_size // cap.block_size) * cap.block_size
    if block_size == 0:
        raise UnsupportedTableError(
            index_path, f"block size is smaller than the table page size {cap.block_size}"
        )

    result = MigrationResult(
        table=str(table),
        direction="to_store",
        block_size=block_size,
        compression=compression,
    )
    logger.info(
        "Copying aria table %s to s3 (block_size=%s compression=%s)",
        table,
        block_size,
        compression,
    )

    logger.info("Creating aria table information %s", descriptor_name)
    with _step("write descriptor", descriptor_name):
        conn.put(
            table.bucket,
            descriptor_name,
            header.to_store_format(index_header, block_size, compression),
        )

    logger.info("Copying index information %s", table.block_prefix(FileKind.INDEX))
    with _step("copy index file", index_path):
        with open(index_path, "rb") as f:
            file_end = f.seek(0, 2)
            blocks, copied = _copy_file_to_store(
                conn,
                table,
                FileKind.INDEX,
                f,
                cap.header_size,
                file_end,
                block_size,
                bool(compression),
                progress,
            )
    result.index_blocks = blocks
    result.bytes_copied += copied + cap.header_size

    data_path = str(local.data_path)
    logger.info("Copying data information %s", table.block_prefix(FileKind.DATA))
    with _step("copy data file", data_path):
        with open(data_path, "rb") as f:
            file_end = f.seek(0, 2)
            blocks, copied = _copy_file_to_store(
                conn,
                table,
                FileKind.DATA,
                f,
                0,
                file_end,
                block_size,
                bool(compression),
                progress,
            )
    result.data_blocks = blocks
    result.bytes_copied += copied

    schema_path = local.schema_path
    if schema_path.exists():
        with _step("copy schema file", str(schema_path)):
            frm = schema_path.read_bytes()
            if len(frm) >= block_size:
                logger.warning(
                    "Size of %s is bigger than block size %s; not copied", schema_path, block_size
                )
            else:
                logger.info("Copying frm file %s", schema_path)
                conn.put(table.bucket, table.schema_name, header.mark_store_engine(frm))
                result.schema_copied = True
                result.bytes_copied += len(frm)

    if not keep_local:
        with _step("remove local files", str(local.path)):
            local.remove_files()

    result.duration_s = time.monotonic() - started
    return result


def copy_from_store(
    conn: StoreClient,
    table: TableId,
    local: LocalTable,
    *,
    force: bool = False,
    progress: ProgressCallback | None = None,
) -> MigrationResult:
    """Rebuild local index, data and schema files from a table's footprint."""
    started = time.monotonic()
    index_path = local.index_path
    if not force and index_path.exists():
        raise TableExistsError(f"Table {index_path}")

    descriptor_name = table.descriptor_name
    descriptor = read_index_header(conn, table)
    problem = header.descriptor_problem(descriptor)
    if problem is not None:
        raise CorruptDescriptorError(descriptor_name, problem)

    index_file_size, data_file_size = header.read_file_sizes(descriptor)
    compression = header.read_compression(descriptor)
    result = MigrationResult(
        table=str(table),
        direction="from_store",
        block_size=header.read_s3_block_size(descriptor),
        compression=compression,
    )
    logger.info("Copying aria table %s from s3", table)

    logger.info("Copying index information %s", table.block_prefix(FileKind.INDEX))
    with _step("write index file", str(index_path)):
        index_path.parent.mkdir(parents=True, exist_ok=True)
        with open(index_path, "wb") as f:
            f.write(header.to_local_format(descriptor))
            blocks, copied = _copy_store_to_file(
                conn,
                table,
                FileKind.INDEX,
                f,
                len(descriptor),
                index_file_size,
                bool(compression),
                progress,
            )
    result.index_blocks = blocks
    result.bytes_copied += copied + len(descriptor)

    data_path = local.data_path
    logger.info("Copying data information %s", table.block_prefix(FileKind.DATA))
    with _step("write data file", str(data_path)):
        with open(data_path, "wb") as f:
            blocks, copied = _copy_store_to_file(
                conn,
                table,
                FileKind.DATA,
                f,
                0,
                data_file_size,
                bool(compression),
                progress,
            )
    result.data_blocks = blocks
    result.bytes_copied += copied

    with _step("write schema file", table.schema_name):
        try:
            frm = conn.get(table.bucket, table.schema_name)
        except ObjectNotFoundError:
            frm = None
        if frm is not None:
            logger.info("Copying frm file %s", local.schema_path)
            local.schema_path.write_bytes(header.mark_local_engine(frm))
            result.schema_copied = True
            result.bytes_copied += len(frm)

    result.duration_s = time.monotonic() - started
    return result


def _delete_prefix(
    conn: StoreClient,
    table: TableId,
    kind: FileKind,
    failures: list[tuple[str, AriaS3Error]],
) -> int:
    prefix = table.block_prefix(kind)
    logger.info("Delete of %s information %s", kind.value, prefix)
    try:
        names = conn.list_prefix(table.bucket, prefix)
    except AriaS3Error as e:
        failures.append((prefix, e))
        return 0

    deleted = 0
    for name in names:
        try:
            conn.delete(table.bucket, name)
        except ObjectNotFoundError:
            logger.warning("Object %s was already gone", name)
            continue
        except AriaS3Error as e:
            failures.append((name, e))
            continue
        deleted += 1
    return deleted


def delete_footprint(conn: StoreClient, table: TableId) -> DeleteResult:
    """Delete every object of a table; the descriptor goes last.

    Deletion continues past individual failures, which are reported together
    in a ``DeleteIncompleteError`` at the end.
    """
    if not conn.exists(table.bucket, table.descriptor_name):
        raise TableNotFoundError(table.database, table.table)

    logger.info("Delete of aria table %s", table)
    failures: list[tuple[str, AriaS3Error]] = []
    result = DeleteResult(table=str(table))
    result.index_deleted = _delete_prefix(conn, table, FileKind.INDEX, failures)
    result.data_deleted = _delete_prefix(conn, table, FileKind.DATA, failures)

    logger.info("Delete of base information and frm")
    # S3 reports success when deleting a missing key, so look before deleting.
    try:
        if conn.exists(table.bucket, table.schema_name):
            conn.delete(table.bucket, table.schema_name)
            result.schema_deleted = True
    except ObjectNotFoundError:
        pass
    except AriaS3Error as e:
        failures.append((table.schema_name, e))

    try:
        conn.delete(table.bucket, table.descriptor_name)
    except AriaS3Error as e:
        failures.append((table.descriptor_name, e))

    if failures:
        raise DeleteIncompleteError(table.database, table.table, failures)
    return result
