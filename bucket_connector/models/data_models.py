"""
Core data models for the bucket connector.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass(frozen=True)
class ObjectDescriptor:
    """Normalized record emitted to the host for one remote object."""
    remote_id: str
    resource_name: str
    uri: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the outbound callback shape."""
        return {
            'remote_id': self.remote_id,
            'resource_name': self.resource_name,
            'uri': self.uri,
            'metadata': dict(self.metadata)
        }


@dataclass
class ListingPage:
    """One raw page of object records as returned by the storage provider."""
    records: List[Dict[str, Any]]
    next_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_token is not None


@dataclass
class WalkResult:
    """Tally of one bucket walk, used for the end-of-sync summary."""
    bucket: str
    pages_delivered: int = 0
    objects_delivered: int = 0
    deliveries_failed: int = 0
    failed: bool = False
    cancelled: bool = False
    error: Optional[str] = None
