"""Structured error types for aria-s3."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported by every aria-s3 operation."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT = "corrupt"
    TRANSPORT = "transport"
    LOCAL_IO = "local_io"


class AriaS3Error(Exception):
    """Base error for all aria-s3 errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT


class ObjectNotFoundError(AriaS3Error):
    """Raised by a store client when a named object does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, bucket: str, name: str) -> None:
        self.bucket = bucket
        self.name = name
        super().__init__(f"Expected object '{name}' doesn't exist in bucket '{bucket}'")


class TableNotFoundError(AriaS3Error):
    """Raised when a table has no descriptor object in the store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, database: str, table: str) -> None:
        self.database = database
        self.table = table
        super().__init__(f"Table {database}.{table} doesn't exist in s3")


class TableExistsError(AriaS3Error):
    """Raised when the migration destination is already occupied and force is not set."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"{location} already exists; use force to overwrite")


class UnsupportedTableError(AriaS3Error):
    """Raised when a local table cannot be copied to the store."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Table {path} doesn't match criteria to be copied to S3: {reason}")


class CorruptBlockError(AriaS3Error):
    """Raised when a block object does not carry a valid compression envelope."""

    kind = ErrorKind.CORRUPT

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Block '{name}' is corrupt: {detail}")


class DecompressionError(CorruptBlockError):
    """Raised when a compressed block fails to inflate to its recorded length."""


class CorruptDescriptorError(AriaS3Error):
    """Raised when a descriptor object is too short or malformed."""

    kind = ErrorKind.CORRUPT

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Descriptor '{name}' is corrupt: {detail}")


class TransportError(AriaS3Error):
    """Raised when communication with the object store fails."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, operation: str, name: str, detail: str) -> None:
        self.operation = operation
        self.name = name
        self.detail = detail
        super().__init__(f"Got error from {operation}({name}): {detail}")


class LocalIOError(AriaS3Error):
    """Raised when a local table file cannot be read or written."""

    kind = ErrorKind.LOCAL_IO

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Local file error on {path}: {detail}")


class MigrationStepError(AriaS3Error):
    """Raised when a migration step fails; earlier steps are not rolled back."""

    def __init__(self, step: str, name: str, cause: AriaS3Error) -> None:
        self.step = step
        self.name = name
        self.cause = cause
        self.kind = cause.kind
        super().__init__(f"Migration step '{step}' failed on '{name}': {cause}")


class DeleteIncompleteError(AriaS3Error):
    """Raised when some objects of a footprint could not be deleted."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, database: str, table: str, failures: list[tuple[str, AriaS3Error]]) -> None:
        self.database = database
        self.table = table
        self.failures = failures
        names = [name for name, _ in failures]
        super().__init__(
            f"Delete of {database}.{table} left {len(failures)} object(s) behind: {names}"
        )


class BlockReadError(AriaS3Error):
    """The single failure surfaced to the page cache when a block cannot be fetched."""

    def __init__(self, name: str, cause: AriaS3Error) -> None:
        self.name = name
        self.cause = cause
        self.cause_kind = cause.kind
        self.kind = cause.kind
        super().__init__(f"Could not read block '{name}' from s3: {cause}")
