"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from aria_s3.cli import app
from tests.helpers import FakeStore

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_store(monkeypatch):
    """Route every CLI connection to one in-memory store."""
    for name in (
        "ARIA_S3_BUCKET",
        "ARIA_S3_ACCESS_KEY",
        "ARIA_S3_SECRET_KEY",
        "ARIA_S3_REGION",
        "ARIA_S3_ENDPOINT_URL",
        "ARIA_S3_BLOCK_SIZE",
        "ARIA_S3_COMPRESSION",
    ):
        monkeypatch.delenv(name, raising=False)
    fake = FakeStore()
    monkeypatch.setattr("aria_s3.cli._client.open_connection", lambda cfg: fake)
    return fake


def invoke(runner: CliRunner, args: list[str]) -> "Result":
    """Invoke the CLI against the bucket used by the tests."""
    return runner.invoke(app, ["--bucket", "bucket"] + args, catch_exceptions=False)
