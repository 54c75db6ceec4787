"""S3-compatible remote blob store (boto3)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import ClientError

from croppy.errors.exceptions import BlobNotFound
from croppy.storage.base import BlobStore, PrefixedBlobStore, join_key, normalize_key
from croppy.url.pattern import content_type_for

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class S3BlobStore:
    """Objects under ``prefix`` in ``bucket``.

    Derivatives kept here are delivered by redirect, so ``public_url`` should
    point at whatever serves the bucket (a CDN or the bucket website).
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any = None,
        public_url: str | None = None,
        endpoint_url: str | None = None,
        region_name: str | None = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = normalize_key(prefix)
        self._client = client or boto3.client(
            "s3", endpoint_url=endpoint_url, region_name=region_name
        )
        self._public_url = public_url.rstrip("/") if public_url else None

    @property
    def bucket(self) -> str:
        return self._bucket

    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self._bucket, Key=self._key(key))
        except ClientError as exc:
            if _is_missing(exc):
                return False
            raise
        return True

    def read(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=self._key(key))
        except ClientError as exc:
            if _is_missing(exc):
                raise BlobNotFound(
                    f"No such object: s3://{self._bucket}/{self._key(key)}", key=key
                ) from exc
            raise
        return response["Body"].read()

    def write(self, key: str, data: bytes) -> None:
        extra: dict[str, str] = {}
        content_type = content_type_for(key)
        if content_type:
            extra["ContentType"] = content_type
        self._client.put_object(Bucket=self._bucket, Key=self._key(key), Body=data, **extra)
        logger.debug("Uploaded s3://%s/%s (%d bytes)", self._bucket, self._key(key), len(data))

    def delete(self, key: str) -> bool:
        if not self.exists(key):
            return False
        self._client.delete_object(Bucket=self._bucket, Key=self._key(key))
        return True

    def list(self, prefix: str = "", recursive: bool = False) -> list[str]:
        full = self._key(prefix)
        params: dict[str, str] = {"Bucket": self._bucket, "Prefix": f"{full}/" if full else ""}
        if not recursive:
            params["Delimiter"] = "/"

        strip = len(self._prefix) + 1 if self._prefix else 0
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(**params):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"][strip:])
        return sorted(keys)

    def is_remote(self) -> bool:
        return True

    def local_root_path(self) -> Path | None:
        return None

    def url(self, key: str) -> str | None:
        base = self._public_url or f"https://{self._bucket}.s3.amazonaws.com"
        return f"{base}/{self._key(key)}"

    def scoped(self, root: str) -> BlobStore:
        return PrefixedBlobStore(self, root)

    def _key(self, key: str) -> str:
        return join_key(self._prefix, key)


def _is_missing(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _MISSING_CODES
