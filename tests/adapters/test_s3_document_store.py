"""
Tests for adapters.s3_document_store with a mocked boto3 client.
"""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from adapters.s3_document_store import S3DocumentStoreAdapter
from shared_utils.error_handler import ExternalServiceError


def _client_error(op: str = "PutObject") -> ClientError:
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, op)


@pytest.fixture()
def s3() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def adapter(s3) -> S3DocumentStoreAdapter:
    return S3DocumentStoreAdapter(bucket="docs", s3_client=s3)


class TestPutDocument:
    def test_writes_utf8_body_with_content_type(self, adapter, s3) -> None:
        uri = adapter.put_document("meetings/meeting-1.md", "# Café", "text/markdown")

        assert uri == "s3://docs/meetings/meeting-1.md"
        s3.put_object.assert_called_once_with(
            Bucket="docs",
            Key="meetings/meeting-1.md",
            Body="# Café".encode("utf-8"),
            ContentType="text/markdown",
        )

    def test_client_error_wrapped(self, adapter, s3) -> None:
        s3.put_object.side_effect = _client_error()
        with pytest.raises(ExternalServiceError) as exc_info:
            adapter.put_document("k", "v", "text/markdown")
        assert exc_info.value.context["service"] == "S3"


class TestGetDocument:
    def test_decodes_body(self, adapter, s3) -> None:
        s3.get_object.return_value = {"Body": io.BytesIO(b"hello")}
        assert adapter.get_document("k") == "hello"

    def test_client_error_wrapped(self, adapter, s3) -> None:
        s3.get_object.side_effect = _client_error("GetObject")
        with pytest.raises(ExternalServiceError):
            adapter.get_document("k")


class TestListDocuments:
    def test_flattens_pages(self, adapter, s3) -> None:
        modified = datetime(2026, 10, 1, tzinfo=timezone.utc)
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "meetings/a.md", "Size": 10, "LastModified": modified}]},
            {"Contents": [{"Key": "meetings/b.md", "Size": 20, "LastModified": modified}]},
            {},
        ]
        s3.get_paginator.return_value = paginator

        docs = adapter.list_documents("meetings/")

        paginator.paginate.assert_called_once_with(Bucket="docs", Prefix="meetings/")
        assert [d["key"] for d in docs] == ["meetings/a.md", "meetings/b.md"]
        assert docs[0]["size"] == 10
        assert docs[0]["last_modified"] == "2026-10-01T00:00:00+00:00"

    def test_client_error_wrapped(self, adapter, s3) -> None:
        s3.get_paginator.return_value.paginate.side_effect = _client_error("ListObjectsV2")
        with pytest.raises(ExternalServiceError):
            adapter.list_documents("meetings/")


class TestClientConstruction:
    def test_endpoint_url_passed_to_boto3(self, monkeypatch) -> None:
        created = {}

        def fake_client(service, **kwargs):
            created.update(kwargs, service=service)
            return MagicMock()

        monkeypatch.setattr("adapters.s3_document_store.boto3.client", fake_client)
        S3DocumentStoreAdapter(bucket="docs", region="auto", endpoint_url="https://r2.example")

        assert created == {"service": "s3", "region_name": "auto", "endpoint_url": "https://r2.example"}
