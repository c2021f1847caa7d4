"""
S3-backed document store adapter.

Implements DocumentStorePort using boto3. Cloudflare R2 and other
S3-compatible stores are reached through ``endpoint_url``.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ports.document_store import DocumentStorePort
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.constants import LogScope
from shared_utils.error_handler import ExternalServiceError


logger = get_scoped_logger(LogScope.ADAPTER)


class S3DocumentStoreAdapter:
    """S3 implementation of DocumentStorePort.

    Documents live at ``{bucket}/{key}``; keys already carry their prefix
    (``meetings/meeting-<id>.md``).
    """

    def __init__(
        self,
        bucket: str,
        region: str = "eu-west-2",
        endpoint_url: str = "",
        s3_client: Optional[object] = None,
    ) -> None:
        self.bucket = bucket
        client_kwargs: dict = {"region_name": region}
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        self._s3 = s3_client or boto3.client("s3", **client_kwargs)

    # ------------------------------------------------------------------
    # DocumentStorePort implementation
    # ------------------------------------------------------------------

    def put_document(self, key: str, content: str, content_type: str) -> str:
        """Write *content* at *key*, replacing any existing object."""
        body = content.encode("utf-8")
        try:
            self._s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("s3_put_document_failed", key=key, error=str(exc))
            raise ExternalServiceError("S3", f"Failed to store document {key}: {exc}") from exc

        uri = f"s3://{self.bucket}/{key}"
        logger.info("document_stored", s3_uri=uri, size_bytes=len(body))
        return uri

    def get_document(self, key: str) -> str:
        try:
            response = self._s3.get_object(Bucket=self.bucket, Key=key)
            data: bytes = response["Body"].read()
        except (ClientError, BotoCoreError) as exc:
            logger.error("s3_get_document_failed", key=key, error=str(exc))
            raise ExternalServiceError("S3", f"Failed to read document {key}: {exc}") from exc
        return data.decode("utf-8")

    def list_documents(self, prefix: str) -> List[Dict[str, object]]:
        """List every object under *prefix*, following continuation tokens."""
        documents: List[Dict[str, object]] = []
        try:
            paginator = self._s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    modified = obj.get("LastModified")
                    documents.append(
                        {
                            "key": obj["Key"],
                            "size": obj.get("Size", 0),
                            "last_modified": modified.isoformat() if modified else None,
                        }
                    )
        except (ClientError, BotoCoreError) as exc:
            logger.error("s3_list_documents_failed", prefix=prefix, error=str(exc))
            raise ExternalServiceError("S3", f"Failed to list documents: {exc}") from exc

        logger.debug("documents_listed", prefix=prefix, count=len(documents))
        return documents
