"""
Models package for the bucket connector.
"""
from .data_models import ObjectDescriptor, ListingPage, WalkResult
from .config import ConnectorOptions, ServiceConfig

__all__ = [
    'ObjectDescriptor',
    'ListingPage',
    'WalkResult',
    'ConnectorOptions',
    'ServiceConfig'
]
