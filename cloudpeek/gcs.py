"""Cloud Storage buckets and objects: models, REST client and table presentation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import requests

STORAGE_API = "https://storage.googleapis.com/storage/v1"
FOLDER = "Folder"
_TIMEOUT = 30
_KB = 1024
_MB = 1024 * 1024


@dataclass
class Bucket:
    """A Cloud Storage bucket."""

    name: str = ""
    location: str = ""
    storage_class: str = ""
    created: datetime = datetime.min


@dataclass
class StorageObject:
    """An object or a folder prefix inside a bucket."""

    name: str = ""
    size: int = 0
    updated: datetime = datetime.min
    type: str = ""  # "Folder" or the object's content type

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER


def _parse_time(text: str) -> datetime:
    if not text:
        return datetime.min
    for pattern in ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z"):
        try:
            return datetime.strptime(text, pattern)
        except ValueError:
            continue
    return datetime.min


class GcsClient:
    """Thin client over the Cloud Storage JSON API."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def _pages(self, url: str, params: dict[str, str]) -> Iterator[dict[str, Any]]:
        page_token = ""
        while True:
            query = dict(params)
            if page_token:
                query["pageToken"] = page_token
            response = self.session.get(url, params=query, timeout=_TIMEOUT)
            response.raise_for_status()
            page = response.json()
            yield page
            page_token = page.get("nextPageToken", "")
            if not page_token:
                return

    def list_buckets(self, project_id: str) -> list[Bucket]:
        """All buckets of the project."""
        return [
            Bucket(
                name=item.get("name", ""),
                location=item.get("location", ""),
                storage_class=item.get("storageClass", ""),
                created=_parse_time(item.get("timeCreated", "")),
            )
            for page in self._pages(f"{STORAGE_API}/b", {"project": project_id})
            for item in page.get("items") or []
        ]

    def list_objects(self, bucket: str, prefix: str) -> list[StorageObject]:
        """Objects and folders directly under the prefix, one level deep."""
        url = f"{STORAGE_API}/b/{bucket}/o"
        objects: list[StorageObject] = []
        for page in self._pages(url, {"prefix": prefix, "delimiter": "/"}):
            for item in page.get("items") or []:
                objects.append(
                    StorageObject(
                        name=item.get("name", ""),
                        size=int(item.get("size", 0) or 0),
                        updated=_parse_time(item.get("updated", "")),
                        type=item.get("contentType", ""),
                    )
                )
            objects.extend(
                StorageObject(name=folder, type=FOLDER)
                for folder in page.get("prefixes") or []
            )
        return objects


def parent_prefix(prefix: str) -> str:
    """Prefix of the folder that holds the given folder prefix."""
    head, sep, _ = prefix.removesuffix("/").rpartition("/")
    return head + sep


def format_size(obj: StorageObject) -> str:
    """Human-readable size; '-' for folders."""
    if obj.is_folder:
        return "-"
    if obj.size > _MB:
        return f"{obj.size / _MB:.1f} MB"
    if obj.size > _KB:
        return f"{obj.size / _KB:.1f} KB"
    return f"{obj.size} B"


def bucket_row(bucket: Bucket) -> list[str]:
    """Table row: name, location, class, creation date."""
    return [
        bucket.name,
        bucket.location,
        bucket.storage_class,
        bucket.created.strftime("%Y-%m-%d"),
    ]


def object_row(obj: StorageObject) -> list[str]:
    """Table row: name, type, size, last update."""
    return [obj.name, obj.type, format_size(obj), obj.updated.strftime("%b %d %H:%M")]


def _contains(query: str, *values: str) -> bool:
    needle = query.lower()
    return any(needle in value.lower() for value in values)


def filter_buckets(buckets: Iterable[Bucket], query: str) -> list[Bucket]:
    """Buckets whose name, location or class contain the query, ignoring case."""
    buckets = list(buckets)
    if not query:
        return buckets
    return [b for b in buckets if _contains(query, b.name, b.location, b.storage_class)]


def filter_objects(objects: Iterable[StorageObject], query: str) -> list[StorageObject]:
    """Objects whose name or type contain the query, ignoring case."""
    objects = list(objects)
    if not query:
        return objects
    return [o for o in objects if _contains(query, o.name, o.type)]