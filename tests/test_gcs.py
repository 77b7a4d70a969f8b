from datetime import datetime, timezone

import pytest
import requests

from cloudpeek.gcs import (
    FOLDER,
    Bucket,
    GcsClient,
    StorageObject,
    bucket_row,
    filter_buckets,
    filter_objects,
    format_size,
    object_row,
    parent_prefix,
)


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"status {self.status}")


class FakeSession:
    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        return self.pages.pop(0)


@pytest.mark.parametrize(
    "prefix, expected",
    [("", ""), ("a/", ""), ("a/b/", "a/"), ("a/b/c/", "a/b/"), ("a/b", "a/")],
)
def test_parent_prefix(prefix, expected):
    assert parent_prefix(prefix) == expected


def test_format_size_folder_and_bytes():
    assert format_size(StorageObject(name="dir/", type=FOLDER, size=99999)) == "-"
    small = format_size(StorageObject(size=1024, type="text/plain"))
    assert small.endswith(" B")
    assert int(small.split()[0]) == 1024


def test_format_size_units():
    kb = format_size(StorageObject(size=2048, type="text/plain"))
    mb = format_size(StorageObject(size=3 * 1024 * 1024, type="text/plain"))
    assert kb.endswith(" KB") and float(kb.split()[0]) == 2.0
    assert mb.endswith(" MB") and float(mb.split()[0]) == 3.0


def test_bucket_row():
    bucket = Bucket("logs", "US", "STANDARD", datetime(2024, 3, 5, tzinfo=timezone.utc))
    assert bucket_row(bucket) == ["logs", "US", "STANDARD", "2024-03-05"]


def test_object_row():
    obj = StorageObject("a.txt", 10, datetime(2024, 1, 2, 15, 4, tzinfo=timezone.utc), "text/plain")
    row = object_row(obj)
    assert row[0] == "a.txt"
    assert row[1] == "text/plain"
    assert row[3] == "Jan 02 15:04"


def test_filter_buckets_case_insensitive():
    buckets = [Bucket("Alpha", "US", "STANDARD"), Bucket("beta", "EU", "NEARLINE")]
    assert filter_buckets(buckets, "ALP") == [buckets[0]]
    assert filter_buckets(buckets, "nearline") == [buckets[1]]
    assert filter_buckets(buckets, "") == buckets


def test_filter_objects():
    objs = [StorageObject("img/", type=FOLDER), StorageObject("doc.txt", type="text/plain")]
    assert filter_objects(objs, "folder") == [objs[0]]
    assert filter_objects(objs, "TEXT") == [objs[1]]
    assert filter_objects(objs, "zzz") == []


def test_list_buckets_paginates():
    session = FakeSession([
        FakeResponse({
            "items": [{"name": "one", "location": "US", "storageClass": "STANDARD",
                       "timeCreated": "2023-06-01T10:20:30.123Z"}],
            "nextPageToken": "next",
        }),
        FakeResponse({"items": [{"name": "two", "location": "EU", "storageClass": "COLDLINE"}]}),
    ])
    buckets = GcsClient(session).list_buckets("proj")
    assert [b.name for b in buckets] == ["one", "two"]
    assert buckets[0].created.date().isoformat() == "2023-06-01"
    assert session.calls[0][1]["project"] == "proj"
    assert session.calls[1][1]["pageToken"] == "next"


def test_list_objects_files_and_folders():
    session = FakeSession([
        FakeResponse({
            "items": [{"name": "data/x.csv", "size": "4096", "contentType": "text/csv",
                       "updated": "2024-01-02T15:04:05Z"}],
            "prefixes": ["data/sub/"],
        })
    ])
    objs = GcsClient(session).list_objects("bkt", "data/")
    assert objs[0].name == "data/x.csv"
    assert objs[0].size == 4096
    assert objs[0].type == "text/csv"
    assert objs[1] == StorageObject(name="data/sub/", type=FOLDER)
    url, params = session.calls[0]
    assert url.endswith("/b/bkt/o")
    assert params["prefix"] == "data/" and params["delimiter"] == "/"


def test_list_buckets_error_raises():
    session = FakeSession([FakeResponse({}, status=403)])
    with pytest.raises(requests.HTTPError):
        GcsClient(session).list_buckets("proj")