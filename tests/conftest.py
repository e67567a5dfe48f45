"""Shared test fixtures for aria-s3 tests."""

from __future__ import annotations

import pytest

from aria_s3.naming import TableId
from tests.helpers import FakeStore


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def table_id() -> TableId:
    return TableId(bucket="bucket", database="db", table="t1")
