# Services package
from .mapper import to_descriptor
from .resolver import resolve_buckets
from .walker import PageWalker
from .sync_service import SyncService

__all__ = ['to_descriptor', 'resolve_buckets', 'PageWalker', 'SyncService']
