"""aria-s3: store paged Aria tables as block objects in an S3 bucket."""

__version__ = "0.1.0"

from aria_s3.client import S3StoreClient, StoreClient, open_connection
from aria_s3.config import AriaS3Config
from aria_s3.errors import (
    AriaS3Error,
    BlockReadError,
    CorruptBlockError,
    CorruptDescriptorError,
    DecompressionError,
    DeleteIncompleteError,
    ErrorKind,
    LocalIOError,
    MigrationStepError,
    ObjectNotFoundError,
    TableExistsError,
    TableNotFoundError,
    TransportError,
    UnsupportedTableError,
)
from aria_s3.fetch import BlockFetcher, StoreTable, fetch_block, open_store_table
from aria_s3.local import LocalTable
from aria_s3.migration import (
    DeleteResult,
    MigrationResult,
    copy_from_store,
    copy_to_store,
    delete_footprint,
)
from aria_s3.naming import FileKind, TableId

__all__ = [
    "__version__",
    "AriaS3Config",
    "StoreClient",
    "S3StoreClient",
    "open_connection",
    "TableId",
    "FileKind",
    "LocalTable",
    "StoreTable",
    "BlockFetcher",
    "fetch_block",
    "open_store_table",
    "MigrationResult",
    "DeleteResult",
    "copy_to_store",
    "copy_from_store",
    "delete_footprint",
    "ErrorKind",
    "AriaS3Error",
    "ObjectNotFoundError",
    "TableNotFoundError",
    "TableExistsError",
    "UnsupportedTableError",
    "CorruptBlockError",
    "DecompressionError",
    "CorruptDescriptorError",
    "TransportError",
    "LocalIOError",
    "MigrationStepError",
    "DeleteIncompleteError",
    "BlockReadError",
]
