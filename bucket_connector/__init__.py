"""
Bucket Connector - enumerates S3 buckets and streams object descriptors to a host.
"""

from .services.sync_service import SyncService
from .clients.callback import CallbackSink, HostCallbackClient, StdoutSink
from .models.config import ConnectorOptions, ServiceConfig
from .models.data_models import ObjectDescriptor
from .exceptions import ConnectorError, ConfigurationError, DiscoveryError, StorageClientError

__version__ = "1.0.0"
__all__ = [
    "SyncService",
    "CallbackSink",
    "HostCallbackClient",
    "StdoutSink",
    "ConnectorOptions",
    "ServiceConfig",
    "ObjectDescriptor",
    "ConnectorError",
    "ConfigurationError",
    "DiscoveryError",
    "StorageClientError"
]
