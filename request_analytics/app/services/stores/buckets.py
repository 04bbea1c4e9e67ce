"""
Object storage backends for the blob store.

A bucket maps string keys to text objects.  ``get`` returns ``None``
for a key that does not exist and ``put`` replaces the whole object.
Both raise ``BucketError`` when the backend cannot be reached.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class BucketError(Exception):
    """Raised when object storage cannot be read or written."""


class FileBucket:
    """Objects stored as files below a root directory."""

    def __init__(self, root: str) -> None:
        self.root = Path(root)

    def _object_path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise BucketError(f"Key {key!r} escapes bucket root")
        return path

    def get(self, key: str) -> Optional[str]:
        path = self._object_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise BucketError(str(exc)) from exc

    def put(self, key: str, body: str) -> None:
        path = self._object_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Readers only ever see a complete object.
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(body)
                os.replace(tmp_name, path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise BucketError(str(exc)) from exc


class S3Bucket:
    """Objects stored in an S3 (or S3‑compatible) bucket."""

    def __init__(self, bucket_name: str, client=None) -> None:
        if not bucket_name:
            raise ValueError("S3 bucket name is required")
        self.bucket_name = bucket_name
        self.client = client or boto3.client("s3")

    def get(self, key: str) -> Optional[str]:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read().decode("utf-8")
        except self.client.exceptions.NoSuchKey:
            return None
        except (BotoCoreError, ClientError) as exc:
            raise BucketError(str(exc)) from exc

    def put(self, key: str, body: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body.encode("utf-8"),
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as exc:
            raise BucketError(str(exc)) from exc
