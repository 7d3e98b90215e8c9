"""
Configuration classes for the bucket connector.
"""
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class ConnectorOptions:
    """Options for a single sync run, parsed from the host's JSON payload."""
    profile: str = ''
    region: str = ''
    max_keys: int = 0
    buckets: Optional[Tuple[str, ...]] = None
    issues: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self):
        if self.buckets is not None and not isinstance(self.buckets, tuple):
            object.__setattr__(self, 'buckets', tuple(self.buckets))

    @property
    def malformed(self) -> bool:
        """True when the payload needed any fallback while parsing."""
        return bool(self.issues)

    @classmethod
    def from_payload(cls, payload: Any) -> 'ConnectorOptions':
        """
        Parse a sync payload leniently.

        Anything that cannot be read falls back to its zero value and is
        recorded in ``issues``; this method never raises.

        Args:
            payload: JSON text (str or bytes) or an already decoded mapping

        Returns:
            ConnectorOptions
        """
        issues: List[str] = []

        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode('utf-8', errors='replace')

        if isinstance(payload, str):
            try:
                data = json.loads(payload) if payload.strip() else {}
            except ValueError as e:
                issues.append(f"payload is not valid JSON: {e}")
                data = {}
        elif payload is None:
            data = {}
        else:
            data = payload

        if not isinstance(data, dict):
            issues.append(f"payload must be a JSON object, got {type(data).__name__}")
            data = {}

        profile = _read_string(data, 'profile', issues)
        region = _read_string(data, 'region', issues)
        max_keys = _read_max_keys(data, issues)
        buckets = _read_buckets(data, issues)

        return cls(
            profile=profile,
            region=region,
            max_keys=max_keys,
            buckets=buckets,
            issues=tuple(issues)
        )

    @classmethod
    def parse_strict(cls, payload: Any) -> 'ConnectorOptions':
        """Parse a sync payload, raising ConfigurationError on any problem."""
        options = cls.from_payload(payload)
        if options.malformed:
            raise ConfigurationError(
                f"Malformed sync options: {'; '.join(options.issues)}",
                issues=options.issues
            )
        return options

    def to_dict(self) -> Dict[str, Any]:
        return {
            'profile': self.profile,
            'region': self.region,
            'max_keys': self.max_keys,
            'buckets': list(self.buckets) if self.buckets is not None else None
        }

    def __str__(self) -> str:
        buckets = ','.join(self.buckets) if self.buckets is not None else '<discover>'
        return (f"profile: {self.profile or '<default>'}, max_keys: {self.max_keys}, "
                f"buckets: {buckets}, region: {self.region or '<default>'}")


def _read_string(data: Dict[str, Any], key: str, issues: List[str]) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        issues.append(f"'{key}' must be a string, got {type(value).__name__}")
        return ''
    return value


def _read_max_keys(data: Dict[str, Any], issues: List[str]) -> int:
    value = data.get('max_keys')
    if value is None:
        return 0
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.append(f"'max_keys' must be an integer, got {type(value).__name__}")
        return 0
    if isinstance(value, float) and not value.is_integer():
        issues.append(f"'max_keys' must be an integer, got {value}")
        return 0
    value = int(value)
    if value < 0:
        issues.append(f"'max_keys' must not be negative, got {value}")
        return 0
    return value


def _read_buckets(data: Dict[str, Any], issues: List[str]) -> Optional[Tuple[str, ...]]:
    value = data.get('buckets')
    if value is None:
        return None
    if not isinstance(value, list):
        issues.append(f"'buckets' must be a list of strings, got {type(value).__name__}")
        return None

    buckets = []
    for index, name in enumerate(value):
        if isinstance(name, str):
            buckets.append(name)
        else:
            issues.append(f"'buckets[{index}]' must be a string, got {type(name).__name__}")
            buckets.append('')
    return tuple(buckets)


@dataclass
class ServiceConfig:
    """Process-level configuration for the connector."""
    endpoint_url: Optional[str] = None
    callback_url: Optional[str] = None
    concurrency: int = 1
    max_retries: int = 3
    strict_options: bool = False
    log_level: str = 'INFO'
    log_json: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Create ServiceConfig from environment variables."""
        return cls(
            endpoint_url=os.getenv('CONNECTOR_S3_ENDPOINT') or None,
            callback_url=os.getenv('CONNECTOR_CALLBACK_URL') or None,
            concurrency=max(1, int(os.getenv('CONNECTOR_CONCURRENCY', '1'))),
            max_retries=max(1, int(os.getenv('CONNECTOR_MAX_RETRIES', '3'))),
            strict_options=_env_flag('CONNECTOR_STRICT_OPTIONS'),
            log_level=os.getenv('CONNECTOR_LOG_LEVEL', 'INFO').upper(),
            log_json=_env_flag('CONNECTOR_LOG_JSON'),
            log_file=os.getenv('CONNECTOR_LOG_FILE') or None
        )
