"""Configuration for the aria-s3 bridge."""

from __future__ import annotations

import os
from dataclasses import dataclass

COMPRESSION_ALGORITHMS: dict[str, int] = {"none": 0, "zlib": 1}

DEFAULT_BLOCK_SIZE = 4 * 1024 * 1024


def compression_code(name: str) -> int:
    """Map a compression algorithm name to the code stored in the table header."""
    try:
        return COMPRESSION_ALGORITHMS[name.lower()]
    except KeyError:
        known = ", ".join(COMPRESSION_ALGORITHMS)
        raise ValueError(f"Unknown compression algorithm '{name}' (expected one of: {known})")


def compression_name(code: int) -> str:
    for name, value in COMPRESSION_ALGORITHMS.items():
        if value == code:
            return name
    return f"unknown({code})"


@dataclass
class AriaS3Config:
    """Connection settings and migration defaults."""

    bucket: str = "MariaDB"
    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None
    endpoint_url: str | None = None
    block_size: int = DEFAULT_BLOCK_SIZE
    compression: str = "none"
    request_timeout_s: float = 10.0
    max_attempts: int = 5

    @property
    def compression_code(self) -> int:
        return compression_code(self.compression)

    @classmethod
    def from_env(cls) -> AriaS3Config:
        """Build a config from ARIA_S3_* environment variables."""
        cfg = cls()
        cfg.bucket = os.getenv("ARIA_S3_BUCKET") or cfg.bucket
        cfg.access_key = os.getenv("ARIA_S3_ACCESS_KEY") or None
        cfg.secret_key = os.getenv("ARIA_S3_SECRET_KEY") or None
        cfg.region = os.getenv("ARIA_S3_REGION") or None
        cfg.endpoint_url = os.getenv("ARIA_S3_ENDPOINT_URL") or None
        block_size = os.getenv("ARIA_S3_BLOCK_SIZE")
        if block_size:
            cfg.block_size = int(block_size)
        cfg.compression = os.getenv("ARIA_S3_COMPRESSION") or cfg.compression
        # Fail early on a misspelled algorithm name.
        compression_code(cfg.compression)
        return cfg
