"""Local table files: ``<path>.MAI`` index, ``<path>.MAD`` data, ``<path>.frm`` schema."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from aria_s3 import header
from aria_s3.errors import LocalIOError, UnsupportedTableError

INDEX_EXT = ".MAI"
DATA_EXT = ".MAD"
SCHEMA_EXT = ".frm"

# Enough of the index file to reach the base info block of any table.
HEADER_PROBE_SIZE = 64 * 1024


@dataclass(frozen=True)
class LocalTable:
    """A table on local disk, addressed by its path without extension."""

    path: Path

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> LocalTable:
        p = Path(path)
        if p.suffix in (INDEX_EXT, DATA_EXT, SCHEMA_EXT):
            p = p.with_suffix("")
        return cls(p)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def index_path(self) -> Path:
        return self.path.with_name(self.path.name + INDEX_EXT)

    @property
    def data_path(self) -> Path:
        return self.path.with_name(self.path.name + DATA_EXT)

    @property
    def schema_path(self) -> Path:
        return self.path.with_name(self.path.name + SCHEMA_EXT)

    def read_index_header(self) -> tuple[bytes, header.TableCapabilities]:
        """Read the index file header and the capabilities it records."""
        index_path = str(self.index_path)
        try:
            with open(index_path, "rb") as f:
                probe = f.read(HEADER_PROBE_SIZE)
                try:
                    cap = header.read_capabilities(probe)
                except ValueError as e:
                    raise UnsupportedTableError(index_path, f"not a table index file ({e})") from e
                if cap.header_size <= len(probe):
                    data = probe[: cap.header_size]
                else:
                    f.seek(0)
                    data = f.read(cap.header_size)
        except OSError as e:
            raise LocalIOError(index_path, str(e)) from e
        if len(data) < cap.header_size:
            raise LocalIOError(
                index_path, f"file ends after {len(data)} of {cap.header_size} header bytes"
            )
        return data, cap

    def remove_files(self) -> None:
        """Remove the index and data files; the schema file stays with the caller."""
        for p in (self.data_path, self.index_path):
            try:
                p.unlink()
            except OSError as e:
                raise LocalIOError(str(p), str(e)) from e
