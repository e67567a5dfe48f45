"""aria-s3 copy-to / copy-from — move a table between disk and S3."""

from __future__ import annotations

from typing import Optional

import typer

from aria_s3.cli import _exitcodes as ec
from aria_s3.cli._client import open_client
from aria_s3.cli._output import DotProgress, print_error, print_object
from aria_s3.config import compression_code
from aria_s3.local import LocalTable
from aria_s3.migration import MAX_BLOCK_SIZE, copy_from_store, copy_to_store
from aria_s3.naming import TableId


def copy_to_cmd(
    path: str = typer.Argument(..., help="Table path without extension, e.g. /var/lib/mysql/db/t1"),
    database: str = typer.Option(..., "--database", "-d", help="Database name in S3"),
    table: Optional[str] = typer.Option(
        None, "--table", "-t", help="Table name in S3 (default: last component of PATH)"
    ),
    block_size: Optional[int] = typer.Option(
        None,
        "--block-size",
        min=1,
        max=MAX_BLOCK_SIZE,
        help="Object block size (default: from table, then config)",
    ),
    compression: Optional[str] = typer.Option(
        None, "--compression", help="Compression algorithm: none or zlib (default: from table)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Replace a table already in S3"),
    keep_local: bool = typer.Option(
        False, "--keep-local", help="Keep local index and data files after the copy"
    ),
) -> None:
    """Copy a non-transactional page-format Aria table to S3."""
    from aria_s3.cli import state

    json_mode = state.json_output
    local = LocalTable.from_path(path)

    compression_id: int | None = None
    if compression is not None:
        try:
            compression_id = compression_code(compression)
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(ec.USAGE_ERROR)

    try:
        cfg, conn = open_client()
    except Exception as e:
        print_error(f"Can't open connection to S3: {e}")
        raise typer.Exit(ec.for_error(e))

    table_id = TableId(bucket=cfg.bucket, database=database, table=table or local.name)
    progress = DotProgress() if state.verbose and not json_mode else None
    try:
        result = copy_to_store(
            conn,
            table_id,
            local,
            block_size=block_size,
            compression=compression_id,
            force=force,
            keep_local=keep_local,
            default_block_size=cfg.block_size,
            progress=progress,
        )
    except ValueError as e:
        if progress is not None:
            progress.finish()
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except Exception as e:
        if progress is not None:
            progress.finish()
        print_error(str(e))
        raise typer.Exit(ec.for_error(e))
    finally:
        conn.close()

    if json_mode:
        print_object(result, json_mode=True)
    else:
        print(
            f"Copied {local.path} to s3://{cfg.bucket}/{database}/{table_id.table}: "
            f"{result.index_blocks} index block(s), {result.data_blocks} data block(s)"
        )


def copy_from_cmd(
    path: str = typer.Argument(..., help="Table path without extension to create"),
    database: str = typer.Option(..., "--database", "-d", help="Database name in S3"),
    table: Optional[str] = typer.Option(
        None, "--table", "-t", help="Table name in S3 (default: last component of PATH)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing local files"),
) -> None:
    """Copy a table from S3 back to local Aria files."""
    from aria_s3.cli import state

    json_mode = state.json_output
    local = LocalTable.from_path(path)

    try:
        cfg, conn = open_client()
    except Exception as e:
        print_error(f"Can't open connection to S3: {e}")
        raise typer.Exit(ec.for_error(e))

    table_id = TableId(bucket=cfg.bucket, database=database, table=table or local.name)
    progress = DotProgress() if state.verbose and not json_mode else None
    try:
        result = copy_from_store(conn, table_id, local, force=force, progress=progress)
    except Exception as e:
        if progress is not None:
            progress.finish()
        print_error(str(e))
        raise typer.Exit(ec.for_error(e))
    finally:
        conn.close()

    if json_mode:
        print_object(result, json_mode=True)
    else:
        print(
            f"Copied s3://{cfg.bucket}/{database}/{table_id.table} to {local.path}: "
            f"{result.bytes_copied:,} bytes"
        )
