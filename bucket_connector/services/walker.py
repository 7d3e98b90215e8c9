"""
Page-by-page traversal of a single bucket listing.
"""
import threading
from typing import List, Optional, Set

from loguru import logger

from ..clients.base import StorageClient
from ..clients.callback import CallbackSink
from ..exceptions import PageFetchError
from ..models.data_models import ObjectDescriptor, WalkResult
from .mapper import to_descriptor


class PageWalker:
    """
    Walks bucket listings and pushes every page to a callback sink.

    Pages are fetched strictly in sequence because each request needs the
    continuation token of the previous one. A failed fetch ends the walk of
    that bucket; a failed delivery is only logged.
    """

    def __init__(self, storage: StorageClient, sink: CallbackSink):
        """
        Initialize the walker.

        Args:
            storage: Storage client shared read-only across buckets
            sink: Receiver of descriptor pages
        """
        self.storage = storage
        self.sink = sink

    def walk(self, bucket: str, max_keys: int = 0,
             cancel_event: Optional[threading.Event] = None) -> WalkResult:
        """
        Enumerate one bucket and deliver each listing page to the sink.

        Args:
            bucket: Bucket to enumerate
            max_keys: Page size bound passed to the provider, 0 for its default
            cancel_event: When set, no further page is fetched

        Returns:
            WalkResult describing what was delivered
        """
        result = WalkResult(bucket=bucket)
        token: Optional[str] = None
        seen_tokens: Set[str] = set()
        page_index = 0

        logger.info(f"Listing objects in bucket '{bucket}'")

        while True:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Sync cancelled - stopping bucket '{bucket}' before page {page_index + 1}")
                result.cancelled = True
                break

            page_index += 1
            try:
                page = self.storage.list_objects_page(bucket, token, max_keys)
            except Exception as e:
                error = PageFetchError(bucket, page_index, e)
                logger.warning(str(error))
                result.failed = True
                result.error = str(error)
                break

            descriptors = [to_descriptor(bucket, record) for record in page.records]
            self._deliver(bucket, page_index, descriptors, result)

            if not page.has_more:
                break
            if page.next_token in seen_tokens:
                logger.error(f"Bucket '{bucket}' returned an already used continuation token after page "
                             f"{page_index}, stopping to avoid refetching pages")
                result.failed = True
                result.error = f"Repeated continuation token after page {page_index}"
                break
            token = page.next_token
            seen_tokens.add(token)

        logger.info(f"Finished bucket '{bucket}' - Pages: {result.pages_delivered}, "
                    f"Objects: {result.objects_delivered}, Failed: {result.failed}")
        return result

    def _deliver(self, bucket: str, page_index: int, page: List[ObjectDescriptor], result: WalkResult) -> None:
        """Hand one page to the sink, logging but never raising on failure."""
        try:
            self.sink.deliver(page)
        except Exception as e:
            result.deliveries_failed += 1
            logger.warning(f"Delivery of page {page_index} of bucket '{bucket}' "
                           f"({len(page)} objects) failed: {e}")
        else:
            logger.debug(f"Delivered page {page_index} of bucket '{bucket}' ({len(page)} objects)")
            result.pages_delivered += 1
            result.objects_delivered += len(page)
