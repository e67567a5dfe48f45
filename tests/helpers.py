"""In-memory store and synthetic Aria tables for tests."""

from __future__ import annotations

import random
from pathlib import Path

from aria_s3 import header
from aria_s3.errors import AriaS3Error, ObjectNotFoundError


class FakeStore:
    """StoreClient that keeps objects in a dict and records every call."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], AriaS3Error] = {}
        self.extra_listing: dict[str, list[str]] = {}
        self.closed = 0
        # S3 semantics: DeleteObject on a missing key succeeds.
        self.silent_missing_delete = False

    def _check(self, op: str, name: str) -> None:
        self.calls.append((op, name))
        err = self.failures.get((op, name))
        if err is not None:
            raise err

    def get(self, bucket: str, name: str) -> bytes:
        self._check("get", name)
        try:
            return self.objects[(bucket, name)]
        except KeyError:
            raise ObjectNotFoundError(bucket, name)

    def put(self, bucket: str, name: str, body: bytes) -> None:
        self._check("put", name)
        self.objects[(bucket, name)] = bytes(body)

    def delete(self, bucket: str, name: str) -> None:
        self._check("delete", name)
        if (bucket, name) not in self.objects:
            if self.silent_missing_delete:
                return
            raise ObjectNotFoundError(bucket, name)
        del self.objects[(bucket, name)]

    def list_prefix(self, bucket: str, prefix: str) -> list[str]:
        self._check("list", prefix)
        names = [n for (b, n) in self.objects if b == bucket and n.startswith(prefix)]
        return sorted(names + self.extra_listing.get(prefix, []))

    def exists(self, bucket: str, name: str) -> bool:
        self._check("exists", name)
        return (bucket, name) in self.objects

    def close(self) -> None:
        self.closed += 1

    def names(self, bucket: str = "bucket") -> list[str]:
        return sorted(n for (b, n) in self.objects if b == bucket)

    def ops(self, op: str) -> list[str]:
        return [name for o, name in self.calls if o == op]


def _store(buf: bytearray, start: int, width: int, value: int) -> None:
    buf[start : start + width] = value.to_bytes(width, "big")


def build_header(
    *,
    header_size: int = 1024,
    page_size: int = 1024,
    base_pos: int = 128,
    transactional: bool = False,
    data_file_type: int = header.BLOCK_RECORD,
    s3_block_size: int = 0,
    compression: int = 0,
    index_file_size: int = 0,
    data_file_size: int = 0,
) -> bytes:
    """A header with recognisable filler bytes and the given field values."""
    buf = bytearray((i * 7 + 3) % 251 for i in range(header_size))
    _store(buf, header.BASE_POS.offset, 2, base_pos)
    _store(buf, header.DATA_FILE_TYPE.offset, 1, data_file_type)
    _store(buf, header.INDEX_FILE_SIZE.offset, 8, index_file_size)
    _store(buf, header.DATA_FILE_SIZE.offset, 8, data_file_size)
    _store(buf, base_pos + header.KEYSTART.offset, 8, header_size)
    _store(buf, base_pos + header.BLOCK_SIZE.offset, 2, page_size)
    _store(buf, base_pos + header.BORN_TRANSACTIONAL.offset, 1, int(transactional))
    _store(buf, base_pos + header.COMPRESSION_ALGORITHM.offset, 1, compression)
    _store(buf, base_pos + header.S3_BLOCK_SIZE.offset, 3, s3_block_size)
    return bytes(buf)


def _body(size: int, fill: str, seed: int) -> bytes:
    if fill == "random":
        return random.Random(seed).randbytes(size)
    line = f"row-{seed:04d} some repetitive page content; ".encode("ascii")
    return (line * (size // len(line) + 1))[:size]


FRM_BYTES = b"\xfe\x01\x0a" + bytes([header.ENGINE_ARIA]) + b"frm-definition" * 8


def make_table(
    base: Path,
    *,
    index_blocks: int = 3,
    data_blocks: int = 2,
    block_size: int = 2048,
    header_size: int = 1024,
    page_size: int = 1024,
    fill: str = "random",
    with_frm: bool = True,
    **header_fields: int,
) -> dict[str, bytes]:
    """Write ``base``.MAI/.MAD/.frm and return their contents by extension."""
    index_body = _body(index_blocks * block_size, fill, 1)
    data = _body(data_blocks * block_size, fill, 2)
    head = build_header(
        header_size=header_size,
        page_size=page_size,
        index_file_size=header_size + len(index_body),
        data_file_size=len(data),
        **header_fields,
    )
    files = {".MAI": head + index_body, ".MAD": data}
    if with_frm:
        files[".frm"] = FRM_BYTES
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext, content in files.items():
        base.with_name(base.name + ext).write_bytes(content)
    return files
