#!/usr/bin/env python3
"""
Simple demo of the bucket connector against a local MinIO.

This script demonstrates:
- Seeding a few buckets with objects
- A sync with explicit buckets and a small page size
- A sync relying on bucket discovery, delivered to the mock host when it runs
"""
import json
import os
import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError
from loguru import logger

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bucket_connector.clients.callback import CallbackSink, HostCallbackClient
from bucket_connector.models.config import ServiceConfig
from bucket_connector.services.sync_service import SyncService

DEMO_BUCKETS = {
    'demo-reports': [f'reports/2024/{month:02d}.csv' for month in range(1, 8)],
    'demo-photos': ['cats/tom.jpg', 'cats/felix.jpg', 'dogs/rex.png'],
    'demo-empty': []
}


def setup_demo_environment():
    """Configure environment for demo."""
    os.environ.setdefault('CONNECTOR_S3_ENDPOINT', 'http://localhost:9001')
    os.environ.setdefault('AWS_ACCESS_KEY_ID', 'minioadmin')
    os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'minioadmin')
    os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')


def seed_buckets(endpoint_url: str):
    """Create the demo buckets and upload small placeholder objects."""
    client = boto3.client('s3', endpoint_url=endpoint_url)
    for bucket, keys in DEMO_BUCKETS.items():
        try:
            client.create_bucket(Bucket=bucket)
            logger.info(f"Created bucket {bucket}")
        except ClientError as e:
            if e.response['Error']['Code'] not in ('BucketAlreadyOwnedByYou', 'BucketAlreadyExists'):
                raise
        for key in keys:
            client.put_object(Bucket=bucket, Key=key, Body=f"demo content for {key}".encode())
    logger.info(f"Seeded {sum(len(keys) for keys in DEMO_BUCKETS.values())} objects")


class PrintingSink(CallbackSink):
    """Logs each page as it arrives."""

    def __init__(self):
        self.page_count = 0

    def deliver(self, page):
        self.page_count += 1
        logger.info(f"📄 Page {self.page_count}: {len(page)} objects")
        for descriptor in page:
            logger.info(f"  • {descriptor.remote_id} (modified {descriptor.metadata['last_modified'] or 'unknown'})")


def main():
    """Run connector demo."""
    logger.remove()
    logger.add(sys.stderr, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> - <level>{message}</level>", level="INFO")

    logger.info("🚀 Bucket Connector Demo")

    try:
        setup_demo_environment()
        config = ServiceConfig.from_env()
        seed_buckets(config.endpoint_url)

        service = SyncService(config)

        logger.info("Syncing explicit buckets with max_keys=3...")
        sink = PrintingSink()
        service.sync(json.dumps({'buckets': ['demo-reports', 'demo-empty'], 'max_keys': 3}), sink)
        logger.success(f"✅ Explicit sync delivered {sink.page_count} pages")

        host = HostCallbackClient(config.callback_url or 'http://localhost:8001')
        if host.health_check():
            logger.info("Syncing every visible bucket into the mock host...")
            service.sync('{}', host)
            logger.success("✅ Discovery sync delivered to the mock host (GET /pages to inspect)")
        else:
            logger.info("Mock host not running - syncing every visible bucket to the log instead")
            service.sync('{}', PrintingSink())

    except Exception as e:
        logger.error(f"❌ Demo failed: {str(e)}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
