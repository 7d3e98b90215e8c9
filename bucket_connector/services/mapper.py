"""
Maps raw S3 listing records to host-facing object descriptors.
"""
from datetime import datetime
from typing import Any, Dict

from ..models.data_models import ObjectDescriptor

ARN_PREFIX = 'arn:aws:s3:::'
MONTH_TO_SECOND_FORMAT = '%m-%d %H:%M:%S'


def object_arn(bucket: str, key: str) -> str:
    """Build the stable identifier of an object from its bucket and key."""
    return f"{ARN_PREFIX}{bucket}/{key}"


def format_last_modified(value: Any) -> str:
    """
    Format a listing timestamp as 'YYYY-MM-DD HH:MM:SS'.

    boto3 hands back datetimes; ISO 8601 strings from other S3-compatible
    stores are parsed first. Absent or unparseable values give ''.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return ''
    if isinstance(value, datetime):
        # %Y is not zero padded below year 1000 on every platform
        return f"{value.year:04d}-{value.strftime(MONTH_TO_SECOND_FORMAT)}"
    return ''


def to_descriptor(bucket: str, record: Dict[str, Any]) -> ObjectDescriptor:
    """
    Convert one list_objects_v2 record into an ObjectDescriptor.

    Missing fields degrade to empty strings; this never raises for a
    mapping record.

    Args:
        bucket: Bucket the record was listed from
        record: Raw record (``Key``, ``LastModified``, ``Size``, ``ETag``, ``StorageClass``)

    Returns:
        ObjectDescriptor whose remote_id and uri are the object's ARN
    """
    key = record.get('Key') or ''
    arn = object_arn(bucket, key)

    size = record.get('Size')
    metadata = {
        'last_modified': format_last_modified(record.get('LastModified')),
        'size': str(size) if size is not None else '',
        'etag': (record.get('ETag') or '').strip('"'),
        'storage_class': record.get('StorageClass') or ''
    }

    return ObjectDescriptor(
        remote_id=arn,
        resource_name=key,
        uri=arn,
        metadata=metadata
    )
