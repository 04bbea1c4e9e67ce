"""
Record store backends.

``build_store`` picks the backend named in the settings.  The rest of
the application only talks to the ``RecordStore`` interface.
"""

from request_analytics.app.core.config import Settings, resolve_path
from request_analytics.app.core.db import get_database_path
from request_analytics.app.services.stores.base import RecordStore
from request_analytics.app.services.stores.blob_store import BlobRecordStore
from request_analytics.app.services.stores.buckets import FileBucket, S3Bucket
from request_analytics.app.services.stores.table_store import TableRecordStore

__all__ = ["RecordStore", "BlobRecordStore", "TableRecordStore", "build_store"]


def build_store(settings: Settings) -> RecordStore:
    """Create the record store selected by ``settings.store_backend``."""
    if settings.store_backend == "table":
        return TableRecordStore(get_database_path(settings.database_url))
    if settings.store_backend == "blob":
        if settings.blob_backend == "s3":
            bucket = S3Bucket(settings.s3_bucket)
        elif settings.blob_backend == "file":
            bucket = FileBucket(resolve_path(settings.blob_root))
        else:
            raise ValueError(f"Unknown blob backend: {settings.blob_backend!r}")
        return BlobRecordStore(bucket, settings.blob_key)
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
