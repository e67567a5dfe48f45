"""aria-s3 info — show the geometry and footprint of a table in S3."""

from __future__ import annotations

from typing import Any

import typer

from aria_s3.cli import _exitcodes as ec
from aria_s3.cli._client import open_client
from aria_s3.cli._output import print_error, print_object
from aria_s3.config import compression_name
from aria_s3.fetch import open_store_table
from aria_s3.naming import FileKind, TableId


def info_cmd(
    database: str = typer.Option(..., "--database", "-d", help="Database name in S3"),
    table: str = typer.Option(..., "--table", "-t", help="Table name in S3"),
) -> None:
    """Show the descriptor geometry and object counts of a table."""
    from aria_s3.cli import state

    json_mode = state.json_output

    try:
        cfg, conn = open_client()
    except Exception as e:
        print_error(f"Can't open connection to S3: {e}")
        raise typer.Exit(ec.for_error(e))

    table_id = TableId(bucket=cfg.bucket, database=database, table=table)
    try:
        store_table = open_store_table(conn, table_id)
        index_objects = conn.list_prefix(cfg.bucket, table_id.block_prefix(FileKind.INDEX))
        data_objects = conn.list_prefix(cfg.bucket, table_id.block_prefix(FileKind.DATA))
        has_schema = conn.exists(cfg.bucket, table_id.schema_name)
    except Exception as e:
        print_error(str(e))
        raise typer.Exit(ec.for_error(e))
    finally:
        conn.close()

    data: dict[str, Any] = {
        "table": str(table_id),
        "bucket": cfg.bucket,
        "page_size": store_table.block_size,
        "block_size": store_table.big_block_size,
        "head_blocks": store_table.head_blocks,
        "compression": compression_name(store_table.compression),
        "index_file_size": store_table.index_file_size,
        "data_file_size": store_table.data_file_size,
        "index_objects": len(index_objects),
        "data_objects": len(data_objects),
        "schema_object": has_schema,
    }
    print_object(data, json_mode=json_mode)
