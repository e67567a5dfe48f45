"""S3 integration tests (MinIO-compatible)."""

from __future__ import annotations

import os
import uuid

import boto3
import pytest
from typer.testing import CliRunner

from aria_s3.cli import app
from aria_s3.client import open_connection
from aria_s3.config import AriaS3Config
from aria_s3.fetch import fetch_block, open_store_table
from aria_s3.local import LocalTable
from aria_s3.migration import copy_from_store, copy_to_store, delete_footprint
from aria_s3.naming import FileKind, TableId
from tests.helpers import make_table

pytestmark = pytest.mark.s3


@pytest.fixture
def s3_config() -> AriaS3Config:
    if os.getenv("ARIA_S3_TEST") != "1":
        pytest.skip("S3 integration tests disabled (set ARIA_S3_TEST=1)")

    endpoint = os.getenv("ARIA_S3_TEST_ENDPOINT", "http://127.0.0.1:9000")
    bucket = os.getenv("ARIA_S3_TEST_BUCKET", "aria-s3-test")
    region = os.getenv("ARIA_S3_TEST_REGION", "us-east-1")

    s3 = boto3.client("s3", endpoint_url=endpoint, region_name=region)
    existing = {b["Name"] for b in s3.list_buckets().get("Buckets", [])}
    if bucket not in existing:
        s3.create_bucket(Bucket=bucket)

    return AriaS3Config(bucket=bucket, region=region, endpoint_url=endpoint)


@pytest.fixture
def database() -> str:
    return f"it_{uuid.uuid4().hex[:12]}"


def test_round_trip_against_s3(s3_config, database, tmp_path) -> None:
    files = make_table(tmp_path / "src" / "t1", fill="text")
    table_id = TableId(bucket=s3_config.bucket, database=database, table="t1")

    with open_connection(s3_config) as conn:
        copy_to_store(
            conn, table_id, LocalTable.from_path(tmp_path / "src" / "t1"),
            block_size=2048, compression=1,
        )
        assert conn.exists(s3_config.bucket, table_id.descriptor_name)

        store_table = open_store_table(conn, table_id)
        assert fetch_block(conn, store_table, FileKind.DATA, 0) == files[".MAD"][:2048]

        target = LocalTable.from_path(tmp_path / "dst" / "t1")
        copy_from_store(conn, table_id, target)
        assert target.index_path.read_bytes() == files[".MAI"]
        assert target.data_path.read_bytes() == files[".MAD"]

        result = delete_footprint(conn, table_id)
        assert result.index_deleted == 3
        assert conn.list_prefix(s3_config.bucket, f"{database}/") == []


def test_cli_against_s3(s3_config, database, tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ARIA_S3_ENDPOINT_URL", s3_config.endpoint_url)
    monkeypatch.setenv("ARIA_S3_REGION", s3_config.region)
    make_table(tmp_path / "t1")
    runner = CliRunner()

    base = ["--bucket", s3_config.bucket]
    result = runner.invoke(
        app, base + ["copy-to", str(tmp_path / "t1"), "-d", database, "--block-size", "2048"]
    )
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, base + ["info", "-d", database, "-t", "t1"])
    assert result.exit_code == 0, result.output
    assert "index_objects: 3" in result.output

    result = runner.invoke(app, base + ["delete", "-d", database, "-t", "t1"])
    assert result.exit_code == 0, result.output
