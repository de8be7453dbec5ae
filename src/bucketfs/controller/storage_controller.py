"""Cloud Storage JSON API controller implementing ObjectStoreClient."""

from __future__ import annotations

import io
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

from bucketfs.auth import AuthInfo, OAuthClient
from bucketfs.errors import (
    BucketFsError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    StorageIOError,
    map_http_error,
)
from bucketfs.models import ObjectListing, ResourceId, StorageItemInfo
from bucketfs.util.time import parse_rfc3339, to_epoch_millis

from .fields import (
    BUCKET_FIELDS,
    BUCKET_LIST_FIELDS,
    DEFAULT_CONTENT_TYPE,
    OBJECT_FIELDS,
    OBJECT_LIST_FIELDS,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class CloudStorageController:
    """
    Cloud Storage controller over a googleapiclient "storage v1" service.

    Notes:
        - The discovery `service` object is NOT exposed.
        - Retryable failures (429, 5xx, network) are retried here with
          exponential backoff; the emulation core never retries.
    """

    DEFAULT_SCOPES: tuple[str, ...] = (
        "https://www.googleapis.com/auth/devstorage.full_control",
    )

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        project_id: Optional[str] = None,
        scopes: Optional[Sequence[str]] = None,
    ) -> None:
        self._project_id = project_id
        self._retry_policy = _RetryPolicy()

        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info)
        self._service = client.build_storage_service(use_scopes, ensure_valid=True)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        project_id: Optional[str] = None,
    ) -> "CloudStorageController":
        """Create controller from a pre-built storage service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._project_id = project_id
        obj._retry_policy = _RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Objects
    # ----------------------------
    def get_object_metadata(self, bucket: str, key: str) -> Optional[StorageItemInfo]:
        req = self._service.objects().get(bucket=bucket, object=key, fields=OBJECT_FIELDS)
        try:
            data = self._execute(req.execute)
        except NotFoundError:
            return None
        return _object_dict_to_item_info(data)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ObjectListing:
        objects: list[StorageItemInfo] = []
        prefixes: list[str] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.objects().list(
                bucket=bucket,
                prefix=prefix or None,
                delimiter=delimiter,
                maxResults=max_results,
                pageToken=page_token,
                fields=OBJECT_LIST_FIELDS,
            )
            data = self._execute(req.execute)
            for item in data.get("items", []):
                objects.append(_object_dict_to_item_info(item))
            prefixes.extend(data.get("prefixes", []))

            if max_results is not None and len(objects) + len(prefixes) >= max_results:
                break
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return ObjectListing(objects=objects, prefixes=prefixes)

    def create_object(
        self,
        bucket: str,
        key: str,
        data: bytes = b"",
        *,
        overwrite: bool = True,
    ) -> StorageItemInfo:
        if not key:
            raise InvalidArgumentError("key must be a non-empty string")

        from googleapiclient.http import MediaIoBaseUpload

        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=DEFAULT_CONTENT_TYPE)
        req = self._service.objects().insert(
            bucket=bucket,
            name=key,
            media_body=media,
            ifGenerationMatch=None if overwrite else 0,
            fields=OBJECT_FIELDS,
        )
        result = self._execute(req.execute)
        return _object_dict_to_item_info(result)

    def read_object(
        self,
        bucket: str,
        key: str,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> bytes:
        if length == 0:
            return b""

        req = self._service.objects().get_media(bucket=bucket, object=key)
        if length is not None:
            req.headers["Range"] = f"bytes={offset}-{offset + length - 1}"
        elif offset:
            req.headers["Range"] = f"bytes={offset}-"
        return self._execute(req.execute)

    def copy_object(
        self,
        src_bucket: str,
        src_key: str,
        dst_bucket: str,
        dst_key: str,
    ) -> StorageItemInfo:
        req = self._service.objects().copy(
            sourceBucket=src_bucket,
            sourceObject=src_key,
            destinationBucket=dst_bucket,
            destinationObject=dst_key,
            body={},
            fields=OBJECT_FIELDS,
        )
        data = self._execute(req.execute)
        return _object_dict_to_item_info(data)

    def delete_object(self, bucket: str, key: str) -> None:
        req = self._service.objects().delete(bucket=bucket, object=key)
        self._execute(req.execute)

    # ----------------------------
    # Buckets
    # ----------------------------
    def bucket_exists(self, bucket: str) -> bool:
        return self.get_bucket_metadata(bucket) is not None

    def get_bucket_metadata(self, bucket: str) -> Optional[StorageItemInfo]:
        req = self._service.buckets().get(bucket=bucket, fields=BUCKET_FIELDS)
        try:
            data = self._execute(req.execute)
        except NotFoundError:
            return None
        return _bucket_dict_to_item_info(data)

    def list_buckets(self) -> list[StorageItemInfo]:
        project = self._require_project()
        buckets: list[StorageItemInfo] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.buckets().list(
                project=project,
                pageToken=page_token,
                fields=BUCKET_LIST_FIELDS,
            )
            data = self._execute(req.execute)
            for item in data.get("items", []):
                buckets.append(_bucket_dict_to_item_info(item))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return buckets

    def create_bucket(self, bucket: str) -> StorageItemInfo:
        req = self._service.buckets().insert(
            project=self._require_project(),
            body={"name": bucket},
            fields=BUCKET_FIELDS,
        )
        data = self._execute(req.execute)
        return _bucket_dict_to_item_info(data)

    def delete_bucket(self, bucket: str) -> None:
        req = self._service.buckets().delete(bucket=bucket)
        self._execute(req.execute)

    def close(self) -> None:
        close = getattr(self._service, "close", None)
        if callable(close):
            close()

    # ----------------------------
    # Internals
    # ----------------------------
    def _require_project(self) -> str:
        if not self._project_id:
            raise InvalidStateError("project_id is required for bucket listing/creation")
        return self._project_id

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug(
                        "Retrying storage request after %s (attempt %d, delay %.1fs)",
                        type(mapped).__name__,
                        attempt + 1,
                        delay,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise StorageIOError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        if type(exc) is StorageIOError:
            status_code = exc.details.get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, BucketFsError):
            return exc

        from googleapiclient.errors import HttpError

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return StorageIOError("Cloud Storage API error", cause=exc)


def _object_dict_to_item_info(data: dict[str, Any]) -> StorageItemInfo:
    bucket = data.get("bucket")
    name = data.get("name")
    if not isinstance(bucket, str) or not isinstance(name, str):
        raise StorageIOError("Malformed object resource", details={"resource": data})

    generation = data.get("generation")
    metadata = data.get("metadata")
    md5 = data.get("md5Hash")
    content_type = data.get("contentType")

    return StorageItemInfo(
        resource_id=ResourceId(bucket, name),
        exists=True,
        creation_time=_parse_millis(data.get("timeCreated")),
        size=_parse_int(data.get("size")),
        content_type=content_type if isinstance(content_type, str) else None,
        generation=_parse_int(generation) if generation is not None else None,
        md5_hash=md5 if isinstance(md5, str) else None,
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )


def _bucket_dict_to_item_info(data: dict[str, Any]) -> StorageItemInfo:
    name = data.get("name")
    if not isinstance(name, str):
        raise StorageIOError("Malformed bucket resource", details={"resource": data})
    return StorageItemInfo(
        resource_id=ResourceId(name),
        exists=True,
        creation_time=_parse_millis(data.get("timeCreated")),
    )


def _parse_millis(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    try:
        return to_epoch_millis(parse_rfc3339(value))
    except ValueError:
        return 0


def _parse_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
