"""
Pytest configuration and fixtures for the bucket connector tests.
"""
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from loguru import logger

from bucket_connector.clients.base import StorageClient
from bucket_connector.clients.callback import CallbackSink
from bucket_connector.models.data_models import ListingPage


def make_record(key: str, last_modified: Optional[datetime] = None, size: int = 0) -> Dict[str, Any]:
    """Build a list_objects_v2 style record."""
    record = {'Key': key, 'Size': size, 'ETag': f'"etag-{key}"', 'StorageClass': 'STANDARD'}
    if last_modified is not None:
        record['LastModified'] = last_modified
    return record


class FakeStorage(StorageClient):
    """
    In-memory storage client.

    ``listings`` maps a bucket to its pages (lists of keys); a bucket mapped to
    an Exception, or a page entry that is an Exception, fails that fetch.
    """

    def __init__(self, listings: Optional[Dict[str, Any]] = None, buckets: Any = None):
        self.listings = listings or {}
        self.buckets = buckets
        self.discovery_calls = 0
        self.page_calls: List[Dict[str, Any]] = []
        self.connection_ok = True
        self.connection_checks = 0

    def test_connection(self) -> bool:
        self.connection_checks += 1
        return self.connection_ok

    def list_buckets(self) -> List[str]:
        self.discovery_calls += 1
        if isinstance(self.buckets, Exception):
            raise self.buckets
        return list(self.buckets or [])

    def list_objects_page(self, bucket: str, continuation_token: Optional[str] = None,
                          max_keys: int = 0) -> ListingPage:
        self.page_calls.append({'bucket': bucket, 'token': continuation_token, 'max_keys': max_keys})

        pages = self.listings.get(bucket, [[]])
        if isinstance(pages, Exception):
            raise pages

        index = int(continuation_token) if continuation_token else 0
        page = pages[index]
        if isinstance(page, Exception):
            raise page

        stamp = datetime(2024, 3, 9, 7, 5, 1, tzinfo=timezone.utc)
        records = [make_record(key, stamp) for key in page]
        next_token = str(index + 1) if index + 1 < len(pages) else None
        return ListingPage(records=records, next_token=next_token)


class RecordingSink(CallbackSink):
    """Sink that keeps every delivered page; optionally raises for chosen calls."""

    def __init__(self, fail_on: Optional[List[int]] = None):
        self.pages = []
        self.calls = 0
        self.fail_on = set(fail_on or [])
        self._lock = threading.Lock()

    def deliver(self, page):
        with self._lock:
            self.calls += 1
            call = self.calls
            if call not in self.fail_on:
                self.pages.append(list(page))
        if call in self.fail_on:
            raise RuntimeError(f"host rejected call {call}")
        return False


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def log_messages():
    """Capture loguru records as 'LEVEL message' strings."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(f"{m.record['level'].name} {m.record['message']}"),
                            level="DEBUG")
    yield messages
    logger.remove(handler_id)
