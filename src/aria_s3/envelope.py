"""Per-block compression envelope.

When a table uses compression every index and data block object starts with::

    [flag: 1 byte][original length: 3 bytes, little-endian][payload]

flag 1 means the payload is zlib compressed, flag 0 means compression was not
worth it and the payload is stored as is. The flag is per block: a compressed
table can hold both kinds. Descriptor and schema objects never carry an
envelope.
"""

from __future__ import annotations

import zlib

from aria_s3.errors import CorruptBlockError, DecompressionError

COMPRESS_HEADER = 4
FLAG_RAW = 0
FLAG_COMPRESSED = 1

# Shorter payloads are always stored raw.
MIN_COMPRESS_LENGTH = 50
# Raw blocks are whole local pages; pages are never smaller than this.
RAW_BLOCK_ALIGNMENT = 1024
MAX_ORIGINAL_LENGTH = (1 << 24) - 1


def _compress(payload: bytes) -> bytes | None:
    """Return the compressed payload, or None when compression does not pay off."""
    if len(payload) < MIN_COMPRESS_LENGTH or len(payload) > MAX_ORIGINAL_LENGTH:
        return None
    packed = zlib.compress(payload)
    if len(packed) >= len(payload):
        return None
    return packed


def encode(payload: bytes, compression: bool) -> bytes:
    """Wrap ``payload`` for storage.

    Without compression the payload is returned unchanged.
    """
    if not compression:
        return bytes(payload)
    packed = _compress(payload)
    if packed is None:
        return bytes([FLAG_RAW]) + (0).to_bytes(3, "little") + payload
    return bytes([FLAG_COMPRESSED]) + len(payload).to_bytes(3, "little") + packed


def decode(raw: bytes, compression: bool, name: str = "") -> bytes:
    """Unwrap a stored block, inflating it if the block's flag says so."""
    if not compression:
        return raw
    if len(raw) < COMPRESS_HEADER:
        raise CorruptBlockError(name, f"object is {len(raw)} bytes, shorter than its header")

    flag = raw[0]
    if flag == FLAG_RAW:
        payload = raw[COMPRESS_HEADER:]
        if len(payload) % RAW_BLOCK_ALIGNMENT:
            raise CorruptBlockError(
                name, f"uncompressed block of {len(payload)} bytes is not page aligned"
            )
        return payload
    if flag != FLAG_COMPRESSED:
        raise CorruptBlockError(name, f"unknown compression flag {flag}")

    length = int.from_bytes(raw[1:COMPRESS_HEADER], "little")
    inflater = zlib.decompressobj()
    try:
        # One byte past the recorded length is enough to detect an overlong block.
        payload = inflater.decompress(raw[COMPRESS_HEADER:], length + 1)
    except zlib.error as e:
        raise DecompressionError(name, f"got error uncompressing s3 packet: {e}") from e
    if inflater.unconsumed_tail:
        raise DecompressionError(name, f"inflates to more than the recorded {length} bytes")
    if not inflater.eof:
        raise DecompressionError(name, "compressed stream is truncated")
    if len(payload) != length:
        raise DecompressionError(
            name, f"uncompressed to {len(payload)} bytes, expected {length}"
        )
    return payload
