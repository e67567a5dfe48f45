"""aria-s3 delete — drop every object of a table from S3."""

from __future__ import annotations

import typer

from aria_s3.cli import _exitcodes as ec
from aria_s3.cli._client import open_client
from aria_s3.cli._output import print_error, print_object
from aria_s3.errors import DeleteIncompleteError
from aria_s3.migration import delete_footprint
from aria_s3.naming import TableId


def delete_cmd(
    database: str = typer.Option(..., "--database", "-d", help="Database name in S3"),
    table: str = typer.Option(..., "--table", "-t", help="Table name in S3"),
) -> None:
    """Delete a table's index, data, schema and descriptor objects."""
    from aria_s3.cli import state

    json_mode = state.json_output

    try:
        cfg, conn = open_client()
    except Exception as e:
        print_error(f"Can't open connection to S3: {e}")
        raise typer.Exit(ec.for_error(e))

    table_id = TableId(bucket=cfg.bucket, database=database, table=table)
    try:
        result = delete_footprint(conn, table_id)
    except DeleteIncompleteError as e:
        print_error(str(e))
        for name, err in e.failures:
            print_error(f"  {name}: {err}")
        raise typer.Exit(ec.for_error(e))
    except Exception as e:
        print_error(str(e))
        raise typer.Exit(ec.for_error(e))
    finally:
        conn.close()

    if json_mode:
        print_object(result, json_mode=True)
    else:
        print(
            f"Deleted {table_id}: {result.index_deleted} index block(s), "
            f"{result.data_deleted} data block(s)"
        )
