"""Tests for the boto3 store client, using botocore's Stubber instead of a live endpoint."""

from __future__ import annotations

import io

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from aria_s3.client import S3StoreClient, open_connection
from aria_s3.config import AriaS3Config
from aria_s3.errors import ErrorKind, ObjectNotFoundError, TransportError


@pytest.fixture
def s3():
    client = boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def test_get_returns_body(s3) -> None:
    client, stubber = s3
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(io.BytesIO(b"block"), 5)},
        {"Bucket": "b", "Key": "db/t1/index/000001"},
    )
    assert S3StoreClient(client).get("b", "db/t1/index/000001") == b"block"


def test_get_missing_object(s3) -> None:
    client, stubber = s3
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    with pytest.raises(ObjectNotFoundError) as exc:
        S3StoreClient(client).get("b", "db/t1/aria")
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert exc.value.name == "db/t1/aria"


def test_get_access_denied_is_transport_error(s3) -> None:
    client, stubber = s3
    stubber.add_client_error("get_object", service_error_code="AccessDenied", http_status_code=403)
    with pytest.raises(TransportError) as exc:
        S3StoreClient(client).get("b", "db/t1/aria")
    assert exc.value.kind == ErrorKind.TRANSPORT
    assert exc.value.operation == "get_object"


def test_put_and_delete(s3) -> None:
    client, stubber = s3
    stubber.add_response(
        "put_object", {}, {"Bucket": "b", "Key": "db/t1/frm", "Body": b"frm"}
    )
    stubber.add_response("delete_object", {}, {"Bucket": "b", "Key": "db/t1/frm"})
    conn = S3StoreClient(client)
    conn.put("b", "db/t1/frm", b"frm")
    conn.delete("b", "db/t1/frm")


def test_put_failure(s3) -> None:
    client, stubber = s3
    stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
    with pytest.raises(TransportError):
        S3StoreClient(client).put("b", "db/t1/aria", b"x")


def test_exists(s3) -> None:
    client, stubber = s3
    stubber.add_response("head_object", {"ContentLength": 3}, {"Bucket": "b", "Key": "db/t1/aria"})
    stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
    conn = S3StoreClient(client)
    assert conn.exists("b", "db/t1/aria") is True
    assert conn.exists("b", "db/t2/aria") is False


def test_list_prefix_follows_pages(s3) -> None:
    client, stubber = s3
    stubber.add_response(
        "list_objects_v2",
        {
            "Contents": [{"Key": "db/t1/index/000001"}, {"Key": "db/t1/index/000002"}],
            "IsTruncated": True,
            "NextContinuationToken": "next",
        },
        {"Bucket": "b", "Prefix": "db/t1/index/"},
    )
    stubber.add_response(
        "list_objects_v2",
        {"Contents": [{"Key": "db/t1/index/000003"}], "IsTruncated": False},
        {"Bucket": "b", "Prefix": "db/t1/index/", "ContinuationToken": "next"},
    )
    names = S3StoreClient(client).list_prefix("b", "db/t1/index/")
    assert names == ["db/t1/index/000001", "db/t1/index/000002", "db/t1/index/000003"]


def test_list_prefix_empty(s3) -> None:
    client, stubber = s3
    stubber.add_response("list_objects_v2", {"IsTruncated": False}, {"Bucket": "b", "Prefix": "p/"})
    assert S3StoreClient(client).list_prefix("b", "p/") == []


def test_open_connection_builds_client() -> None:
    cfg = AriaS3Config(
        bucket="b",
        access_key="test",
        secret_key="test",
        region="us-east-1",
        endpoint_url="http://127.0.0.1:9000",
    )
    with open_connection(cfg) as conn:
        assert isinstance(conn, S3StoreClient)
