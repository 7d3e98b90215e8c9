"""
Decides which buckets a sync run walks.
"""
from typing import List

from loguru import logger

from ..clients.base import StorageClient
from ..exceptions import DiscoveryError
from ..models.config import ConnectorOptions


def resolve_buckets(options: ConnectorOptions, storage: StorageClient) -> List[str]:
    """
    Return the buckets to walk for these options.

    An explicit bucket list, even an empty one, is returned unchanged and
    discovery is skipped. Otherwise every bucket visible to the storage
    client is used.

    Raises:
        DiscoveryError: If discovery is needed and the listing call fails
    """
    if options.buckets is not None:
        logger.debug(f"Using {len(options.buckets)} configured buckets")
        return list(options.buckets)

    logger.info("No buckets configured - discovering visible buckets")
    try:
        buckets = storage.list_buckets()
    except Exception as e:
        logger.warning(f"Failed to list buckets: {e}")
        raise DiscoveryError(f"Failed to list buckets: {e}") from e

    buckets = [name if name is not None else '' for name in buckets]
    logger.info(f"Discovered {len(buckets)} buckets")
    return buckets
