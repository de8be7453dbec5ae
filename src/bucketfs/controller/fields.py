"""Field definitions for Cloud Storage JSON API responses."""

from __future__ import annotations

OBJECT_FIELDS: str = (
    "bucket,"
    "name,"
    "size,"
    "timeCreated,"
    "contentType,"
    "generation,"
    "md5Hash,"
    "metadata"
)

OBJECT_LIST_FIELDS: str = f"nextPageToken,prefixes,items({OBJECT_FIELDS})"

BUCKET_FIELDS: str = "name,timeCreated"

BUCKET_LIST_FIELDS: str = f"nextPageToken,items({BUCKET_FIELDS})"

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
