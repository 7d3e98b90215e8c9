"""
S3 client manager implementing bucket discovery and paged object listing.
"""
import time
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError, EndpointConnectionError
from loguru import logger

from .base import StorageClient
from ..models.config import ConnectorOptions
from ..models.data_models import ListingPage


class S3Manager(StorageClient):
    """Lists buckets and objects through a single boto3 S3 client."""

    def __init__(self, client, max_retries: int = 3, backoff_factor: float = 1.0):
        """
        Initialize S3Manager around an existing boto3 client.

        Args:
            client: boto3 S3 client
            max_retries: Attempts per storage call before giving up
            backoff_factor: Base delay in seconds for exponential backoff
        """
        self.client = client
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor

    @classmethod
    def from_options(cls, options: ConnectorOptions, endpoint_url: Optional[str] = None,
                     max_retries: int = 3) -> 'S3Manager':
        """Create an S3Manager for the profile and region named in the options."""
        session = boto3.Session(
            profile_name=options.profile or None,
            region_name=options.region or None
        )
        client = session.client('s3', endpoint_url=endpoint_url)
        logger.debug(f"Created S3 client (profile: {options.profile or '<default>'}, "
                     f"region: {session.region_name or '<default>'}, endpoint: {endpoint_url or '<aws>'})")
        return cls(client, max_retries=max_retries)

    def _retry_operation(self, operation, max_retries: Optional[int] = None, backoff_factor: Optional[float] = None):
        """Execute an operation with exponential backoff retry logic."""
        max_retries = max_retries or self.max_retries
        backoff_factor = self.backoff_factor if backoff_factor is None else backoff_factor

        for attempt in range(max_retries):
            try:
                return operation()
            except (ClientError, EndpointConnectionError) as e:
                if attempt == max_retries - 1:
                    logger.error(f"Operation failed after {max_retries} attempts: {e}")
                    raise

                wait_time = backoff_factor * (2 ** attempt)
                logger.warning(f"Operation failed (attempt {attempt + 1}/{max_retries}), retrying in {wait_time}s: {e}")
                time.sleep(wait_time)

    def list_buckets(self) -> List[str]:
        """
        List the names of all buckets visible to the client.

        Buckets reported without a name are kept as empty strings so the
        count matches the provider's listing.

        Returns:
            List of bucket names in provider order
        """
        names: List[str] = []
        token: Optional[str] = None

        while True:
            params: Dict[str, Any] = {}
            if token:
                params['ContinuationToken'] = token

            response = self._retry_operation(lambda: self.client.list_buckets(**params))
            for bucket in response.get('Buckets', []):
                names.append(bucket.get('Name') or '')

            token = response.get('ContinuationToken')
            if not token:
                break

        logger.debug(f"Discovered {len(names)} buckets")
        return names

    def list_objects_page(self, bucket: str, continuation_token: Optional[str] = None,
                          max_keys: int = 0) -> ListingPage:
        """
        Fetch one page of a bucket listing with list_objects_v2.

        Args:
            bucket: Bucket to list
            continuation_token: Token returned with the previous page
            max_keys: Page size bound, omitted from the request when 0

        Returns:
            ListingPage with the raw records and the next continuation token
        """
        params: Dict[str, Any] = {'Bucket': bucket}
        if continuation_token:
            params['ContinuationToken'] = continuation_token
        if max_keys > 0:
            params['MaxKeys'] = max_keys

        response = self._retry_operation(lambda: self.client.list_objects_v2(**params))

        next_token = None
        if response.get('IsTruncated'):
            next_token = response.get('NextContinuationToken') or None

        return ListingPage(records=list(response.get('Contents', [])), next_token=next_token)

    def test_connection(self) -> bool:
        """
        Test that the credentials can reach the S3 service.

        Returns:
            bool: True if connection successful, False otherwise
        """
        try:
            self.client.list_buckets()
            logger.info("S3 connection test successful")
            return True
        except Exception as e:
            logger.error(f"S3 connection test failed: {e}")
            return False
