"""Process exit codes for the aria-s3 CLI."""

from __future__ import annotations

from aria_s3.errors import AriaS3Error, ErrorKind

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
NOT_FOUND = 3
ALREADY_EXISTS = 4
UNSUPPORTED_FORMAT = 5
CORRUPT = 6
TRANSPORT = 7
LOCAL_IO = 8

_BY_KIND = {
    ErrorKind.NOT_FOUND: NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: ALREADY_EXISTS,
    ErrorKind.UNSUPPORTED_FORMAT: UNSUPPORTED_FORMAT,
    ErrorKind.CORRUPT: CORRUPT,
    ErrorKind.TRANSPORT: TRANSPORT,
    ErrorKind.LOCAL_IO: LOCAL_IO,
}


def for_error(err: Exception) -> int:
    if isinstance(err, AriaS3Error):
        return _BY_KIND.get(err.kind, GENERAL_ERROR)
    return GENERAL_ERROR
