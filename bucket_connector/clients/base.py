"""
Storage client contract consumed by the sync engine.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.data_models import ListingPage


class StorageClient(ABC):
    """Read-only view of an object store: bucket discovery and paged listing."""

    @abstractmethod
    def list_buckets(self) -> List[str]:
        """Return the names of all buckets visible to the current credentials."""
        pass

    @abstractmethod
    def list_objects_page(self, bucket: str, continuation_token: Optional[str] = None,
                          max_keys: int = 0) -> ListingPage:
        """
        Fetch one page of a bucket listing.

        Args:
            bucket: Bucket to list
            continuation_token: Token from the previous page, None for the first page
            max_keys: Upper bound on records per page, 0 for the provider default

        Returns:
            ListingPage whose next_token is None once the listing is exhausted.
            Records carry ``LastModified`` as a datetime, as boto3 returns it;
            ISO 8601 strings are accepted too, anything else maps to ""
        """
        pass

    def test_connection(self) -> bool:
        """Return True when the store can be reached with the current credentials."""
        return True
