"""Fixed-offset access to the local table header and schema file.

The index file header is owned by the local table engine. This module only
knows the handful of fields listed in ``FIELDS``: ``owned`` fields are
rewritten when a table moves in or out of the store, ``foreign`` fields are
read to learn the table's geometry. Fields anchored at ``base`` are relative
to the base info block whose position is stored in the header itself. All
multi-byte header fields are big-endian.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# Engine identity byte in the schema file.
FRM_ENGINE_OFFSET = 3
ENGINE_S3 = 41
ENGINE_ARIA = 42

# data_file_type value for page-oriented rows.
BLOCK_RECORD = 3

STATE_HEADER_SIZE = 24
LSN_STORE_SIZE = 7
FILE_SIZES_OFFSET = STATE_HEADER_SIZE + 4 + LSN_STORE_SIZE * 3 + 8 * 5


@dataclass(frozen=True)
class HeaderField:
    name: str
    offset: int
    width: int
    anchor: Literal["header", "base"]
    region: Literal["owned", "foreign"]


BASE_POS = HeaderField("base_pos", 12, 2, "header", "foreign")
DATA_FILE_TYPE = HeaderField("data_file_type", 22, 1, "header", "foreign")
INDEX_FILE_SIZE = HeaderField("index_file_size", FILE_SIZES_OFFSET, 8, "header", "foreign")
DATA_FILE_SIZE = HeaderField("data_file_size", FILE_SIZES_OFFSET + 8, 8, "header", "foreign")
KEYSTART = HeaderField("keystart", 16, 8, "base", "foreign")
BLOCK_SIZE = HeaderField("block_size", 100, 2, "base", "foreign")
BORN_TRANSACTIONAL = HeaderField("born_transactional", 106, 1, "base", "foreign")
COMPRESSION_ALGORITHM = HeaderField("compression_algorithm", 107, 1, "base", "owned")
S3_BLOCK_SIZE = HeaderField("s3_block_size", 119, 3, "base", "owned")

FIELDS = (
    BASE_POS,
    DATA_FILE_TYPE,
    INDEX_FILE_SIZE,
    DATA_FILE_SIZE,
    KEYSTART,
    BLOCK_SIZE,
    BORN_TRANSACTIONAL,
    COMPRESSION_ALGORITHM,
    S3_BLOCK_SIZE,
)

# A descriptor must at least reach the recorded file sizes.
MIN_STATE_INFO_SIZE = DATA_FILE_SIZE.offset + DATA_FILE_SIZE.width
BASE_INFO_MIN_SIZE = S3_BLOCK_SIZE.offset + S3_BLOCK_SIZE.width

# Local pages are a power of two and never smaller than this.
MIN_PAGE_SIZE = 1024


@dataclass(frozen=True)
class TableCapabilities:
    """What the local header says about a table."""

    transactional: bool
    data_file_type: int
    block_size: int
    header_size: int
    s3_block_size: int
    compression: int


def base_offset(header: bytes) -> int:
    return read_field(header, BASE_POS)


def _position(header: bytes, field: HeaderField) -> int:
    start = field.offset
    if field.anchor == "base":
        start += base_offset(header)
    if start + field.width > len(header):
        raise ValueError(
            f"Header of {len(header)} bytes is too short for field '{field.name}' "
            f"at {start}..{start + field.width}"
        )
    return start


def read_field(header: bytes, field: HeaderField) -> int:
    start = _position(header, field)
    return int.from_bytes(header[start : start + field.width], "big")


def write_field(header: bytearray, field: HeaderField, value: int) -> None:
    if field.region != "owned":
        raise ValueError(f"Field '{field.name}' belongs to the local engine")
    start = _position(header, field)
    header[start : start + field.width] = value.to_bytes(field.width, "big")


def to_store_format(header: bytes, block_size: int, compression: int) -> bytes:
    """Record the object block size and compression algorithm in the header."""
    out = bytearray(header)
    write_field(out, COMPRESSION_ALGORITHM, compression)
    write_field(out, S3_BLOCK_SIZE, block_size)
    return bytes(out)


def to_local_format(header: bytes) -> bytes:
    """Clear the store fields so the header describes a plain disk table."""
    out = bytearray(header)
    write_field(out, COMPRESSION_ALGORITHM, 0)
    write_field(out, S3_BLOCK_SIZE, 0)
    return bytes(out)


def _mark_engine(frm: bytes, engine: int) -> bytes:
    if len(frm) <= FRM_ENGINE_OFFSET:
        raise ValueError(f"Schema file of {len(frm)} bytes has no engine byte")
    out = bytearray(frm)
    out[FRM_ENGINE_OFFSET] = engine
    return bytes(out)


def mark_store_engine(frm: bytes) -> bytes:
    return _mark_engine(frm, ENGINE_S3)


def mark_local_engine(frm: bytes) -> bytes:
    return _mark_engine(frm, ENGINE_ARIA)


def read_capabilities(header: bytes) -> TableCapabilities:
    return TableCapabilities(
        transactional=bool(read_field(header, BORN_TRANSACTIONAL)),
        data_file_type=read_field(header, DATA_FILE_TYPE),
        block_size=read_field(header, BLOCK_SIZE),
        header_size=read_field(header, KEYSTART),
        s3_block_size=read_field(header, S3_BLOCK_SIZE),
        compression=read_field(header, COMPRESSION_ALGORITHM),
    )


def read_file_sizes(descriptor: bytes) -> tuple[int, int]:
    """Return the (index file size, data file size) recorded in the header."""
    return read_field(descriptor, INDEX_FILE_SIZE), read_field(descriptor, DATA_FILE_SIZE)


def read_compression(header: bytes) -> int:
    return read_field(header, COMPRESSION_ALGORITHM)


def read_s3_block_size(header: bytes) -> int:
    return read_field(header, S3_BLOCK_SIZE)


def descriptor_problem(descriptor: bytes) -> str | None:
    """Describe why ``descriptor`` cannot be a table header, or None if it can."""
    if len(descriptor) < MIN_STATE_INFO_SIZE:
        return f"wrong block length for first block: {len(descriptor)}"
    base = base_offset(descriptor)
    if base + BASE_INFO_MIN_SIZE > len(descriptor):
        return f"base info at {base} runs past the end of the {len(descriptor)} byte block"
    return None


def geometry_problem(cap: TableCapabilities) -> str | None:
    """Describe why the recorded page geometry is unusable, or None if it is sound.

    The page size must be a power of two of at least ``MIN_PAGE_SIZE`` and the
    header must fill a whole number of pages.
    """
    page_size = cap.block_size
    if page_size < MIN_PAGE_SIZE or page_size & (page_size - 1):
        return f"invalid page size {page_size}"
    if cap.header_size <= 0 or cap.header_size % page_size:
        return f"header size {cap.header_size} is not a multiple of page size {page_size}"
    return None
