"""
Object storage for uploaded media.

`S3MediaStore` is used when a bucket is configured; otherwise files are
written under ``UPLOAD_FOLDER`` and served by the application at
``/media/<key>``.
"""
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from tenantcms.errors import ExternalDependencyError

logger = logging.getLogger(__name__)

LONG_LIVED_CACHE = "public, max-age=31536000"


class MediaStore(ABC):
    """Storage capability: put bytes under a key, get back a durable URL."""

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> str:
        """Store `body` under `key` and return its public URL."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove `key`; returns False when nothing was stored there."""

    @abstractmethod
    def key_from_url(self, url: str) -> Optional[str]:
        """Invert `put`'s URL back into a key, or None if it is not ours."""


class S3MediaStore(MediaStore):
    def __init__(self, bucket: str, region: str, client=None):
        self.bucket = bucket
        self.region = region
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def put(self, key, body, content_type):
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                CacheControl=LONG_LIVED_CACHE,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload of %s failed: %s", key, exc)
            raise ExternalDependencyError("Upload failed") from exc

        logger.info("Uploaded s3://%s/%s", self.bucket, key)
        return self.url_for(key)

    def delete(self, key):
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 delete of %s failed: %s", key, exc)
            raise ExternalDependencyError("Delete failed") from exc
        return True

    def key_from_url(self, url):
        parsed = urlparse(url)
        if not parsed.path or parsed.path == "/":
            return None
        return parsed.path.lstrip("/")


class LocalMediaStore(MediaStore):
    def __init__(self, root: str, url_prefix: str = "/media"):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip("/")

    def path_for(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, key))
        if os.path.commonpath([self.root, path]) != self.root:
            raise ValueError(f"Key escapes media root: {key}")
        return path

    def put(self, key, body, content_type):
        path = self.path_for(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as fh:
                fh.write(body)
        except OSError as exc:
            logger.error("Failed to write media file %s: %s", path, exc)
            raise ExternalDependencyError("Upload failed") from exc
        return f"{self.url_prefix}/{key}"

    def delete(self, key):
        path = self.path_for(key)
        if not os.path.exists(path):
            return False
        try:
            os.remove(path)
        except OSError as exc:
            logger.error("Failed to delete media file %s: %s", path, exc)
            raise ExternalDependencyError("Delete failed") from exc
        return True

    def key_from_url(self, url):
        path = urlparse(url).path
        prefix = self.url_prefix + "/"
        if not path.startswith(prefix):
            return None
        return path[len(prefix):] or None


def media_store_from_config(config) -> MediaStore:
    bucket = config.get("S3_MEDIA_BUCKET")
    if bucket:
        return S3MediaStore(bucket, config.get("S3_MEDIA_REGION") or "eu-central-1")
    return LocalMediaStore(config.get("UPLOAD_FOLDER") or "uploads")
