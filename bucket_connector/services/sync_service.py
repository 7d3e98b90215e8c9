"""
Sync orchestrator: the single entry point a host calls to enumerate buckets.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, List, Optional

from loguru import logger

from ..clients.base import StorageClient
from ..clients.callback import CallbackSink
from ..clients.s3_manager import S3Manager
from ..exceptions import ConfigurationError, StorageClientError
from ..models.config import ConnectorOptions, ServiceConfig
from ..models.data_models import WalkResult
from .resolver import resolve_buckets
from .walker import PageWalker

StorageFactory = Callable[[ConnectorOptions], StorageClient]


class SyncService:
    """
    Runs a sync: parse options, resolve buckets, walk each bucket into the sink.

    The service keeps no state between runs. Each call to ``sync`` builds its
    own storage client and passes it explicitly to the walker.
    """

    def __init__(self, config: Optional[ServiceConfig] = None,
                 storage_factory: Optional[StorageFactory] = None):
        """
        Initialize sync service with configuration.

        Args:
            config: ServiceConfig, defaults to an all-defaults instance
            storage_factory: Builds a StorageClient from the run's options,
                defaults to S3Manager.from_options
        """
        self.config = config or ServiceConfig()
        self.storage_factory = storage_factory or self._default_storage_factory

        logger.debug(f"SyncService initialized (concurrency: {self.config.concurrency})")

    def _default_storage_factory(self, options: ConnectorOptions) -> StorageClient:
        return S3Manager.from_options(
            options,
            endpoint_url=self.config.endpoint_url,
            max_retries=self.config.max_retries
        )

    def sync(self, payload: Any, sink: CallbackSink,
             cancel_event: Optional[threading.Event] = None) -> None:
        """
        Enumerate every resolved bucket and stream its pages into the sink.

        Page fetch and delivery failures are contained per bucket and only
        logged, so a run that returns normally may still be partial.

        Args:
            payload: JSON sync options (profile, region, max_keys, buckets)
            sink: Receiver of descriptor pages
            cancel_event: Optional signal to stop fetching further pages

        Raises:
            ConfigurationError: If the payload is malformed and strict options are enabled
            StorageClientError: If the storage client cannot be built. Like
                DiscoveryError it ends the run before any bucket is walked
                instead of letting a run with no client sync nothing
            DiscoveryError: If buckets had to be discovered and listing them failed
        """
        start_time = datetime.now()
        options = self.parse_options(payload)
        logger.info(f"Starting sync - {options}")

        try:
            storage = self.storage_factory(options)
        except Exception as e:
            logger.error(f"Failed to create storage client: {e}")
            raise StorageClientError(f"Failed to create storage client: {e}") from e

        buckets = resolve_buckets(options, storage)
        if not buckets:
            logger.info("No buckets to sync")
            return None

        walker = PageWalker(storage, sink)
        results = self._walk_buckets(walker, buckets, options.max_keys, cancel_event)

        duration = (datetime.now() - start_time).total_seconds()
        failed = [result.bucket for result in results if result.failed]
        logger.info(f"Sync completed - Buckets: {len(buckets)}, "
                    f"Pages: {sum(result.pages_delivered for result in results)}, "
                    f"Objects: {sum(result.objects_delivered for result in results)}, "
                    f"Failed buckets: {len(failed)}, "
                    f"Duration: {duration:.2f} seconds")
        if failed:
            logger.warning(f"Sync is partial - listing stopped early for: {', '.join(repr(name) for name in failed)}")
        if any(result.cancelled for result in results):
            logger.warning("Sync was cancelled before every bucket was fully listed")
        return None

    def parse_options(self, payload: Any) -> ConnectorOptions:
        """Parse the payload strictly or leniently as configured, logging every issue found."""
        if self.config.strict_options:
            try:
                return ConnectorOptions.parse_strict(payload)
            except ConfigurationError as e:
                logger.error(str(e))
                raise

        options = ConnectorOptions.from_payload(payload)
        if options.malformed:
            for issue in options.issues:
                logger.warning(f"Malformed sync options: {issue}")
            logger.warning("Continuing with default values for the malformed options")
        return options

    def _walk_buckets(self, walker: PageWalker, buckets: List[str], max_keys: int,
                      cancel_event: Optional[threading.Event]) -> List[WalkResult]:
        """Walk buckets sequentially, or on a bounded worker pool when configured."""
        workers = min(self.config.concurrency, len(buckets))

        if workers <= 1:
            return [self._walk_one(walker, bucket, max_keys, cancel_event) for bucket in buckets]

        logger.info(f"Walking {len(buckets)} buckets with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='bucket-walker') as executor:
            futures = [executor.submit(self._walk_one, walker, bucket, max_keys, cancel_event)
                       for bucket in buckets]
            return [future.result() for future in futures]

    def _walk_one(self, walker: PageWalker, bucket: str, max_keys: int,
                  cancel_event: Optional[threading.Event]) -> WalkResult:
        try:
            return walker.walk(bucket, max_keys, cancel_event)
        except Exception as e:
            logger.error(f"Unexpected error walking bucket '{bucket}': {e}")
            return WalkResult(bucket=bucket, failed=True, error=str(e))
