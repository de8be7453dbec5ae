"""Bidirectional mapping between hierarchical paths and ResourceId."""

from __future__ import annotations

import re

from bucketfs.errors import InvalidArgumentError
from bucketfs.models import ResourceId
from bucketfs.util.keys import PATH_DELIMITER

# Cloud Storage bucket naming (dotted names up to 222 chars are not supported).
_BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9._-]{1,61}[a-z0-9]$")


class PathCodec:
    """
    Converts "gs://bucket/key" style paths to ResourceId and back.

    Accepted forms:
        - "gs:/" or "gs://"        -> global root
        - "gs://bucket[/]"         -> bucket
        - "gs://bucket/some/key"   -> object (key kept verbatim)

    Object keys are opaque: "." and empty segments are not collapsed. The
    codec never equates "d0" with "d0/"; the resolver does that on lookup.
    """

    def __init__(self, scheme: str = "gs") -> None:
        if not scheme or not scheme.isalnum():
            raise InvalidArgumentError(
                "scheme must be a non-empty alphanumeric string",
                details={"scheme": scheme},
            )
        self._scheme = scheme

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def root_path(self) -> str:
        return f"{self._scheme}:{PATH_DELIMITER}"

    def to_resource_id(self, path: str, allow_empty_object_name: bool = False) -> ResourceId:
        """
        Parse path into a ResourceId.

        Raises:
            InvalidArgumentError: on wrong scheme, missing authority, invalid
                bucket name, or an empty object name when not allowed.
        """
        if not isinstance(path, str) or not path:
            raise InvalidArgumentError("path must be a non-empty string", details={"path": path})

        prefix = f"{self._scheme}:"
        if not path.startswith(prefix):
            raise InvalidArgumentError(
                f"path must use the '{self._scheme}' scheme",
                details={"path": path},
            )

        rest = path[len(prefix):]
        if rest in (PATH_DELIMITER, PATH_DELIMITER * 2):
            return ResourceId.ROOT
        if not rest.startswith(PATH_DELIMITER * 2):
            raise InvalidArgumentError(
                "path is missing a bucket authority",
                details={"path": path},
            )

        authority, sep, object_name = rest[2:].partition(PATH_DELIMITER)
        validate_bucket_name(authority, path=path)

        if not object_name:
            if not allow_empty_object_name:
                raise InvalidArgumentError(
                    "path must name an object, not a bucket",
                    details={"path": path},
                )
            return ResourceId(authority)
        return ResourceId(authority, object_name)

    def to_path(self, resource_id: ResourceId) -> str:
        if resource_id.is_root:
            return self.root_path
        base = f"{self._scheme}://{resource_id.bucket_name}/"
        if resource_id.object_name is None:
            return base
        return base + resource_id.object_name

    def normalize(self, path: str) -> str:
        """Return the canonical spelling of path."""
        return self.to_path(self.to_resource_id(path, allow_empty_object_name=True))

    def item_name(self, path: str) -> str:
        """Return the last component of path (bucket name for a bucket, '' for root)."""
        rid = self.to_resource_id(path, allow_empty_object_name=True)
        if rid.is_root:
            return ""
        if rid.object_name is None:
            return rid.bucket_name  # type: ignore[return-value]
        return rid.object_name[len(rid.parent().key_prefix):]

    def parent_path(self, path: str) -> str:
        rid = self.to_resource_id(path, allow_empty_object_name=True)
        return self.to_path(rid.parent())


def validate_bucket_name(name: str, *, path: str | None = None) -> None:
    if not _BUCKET_NAME_RE.match(name or ""):
        raise InvalidArgumentError(
            "invalid bucket name",
            details={"bucket_name": name, "path": path},
        )
