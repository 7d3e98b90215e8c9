"""
Main entry point for the bucket connector.
"""
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .clients.callback import CallbackSink, HostCallbackClient, StdoutSink
from .exceptions import ConfigurationError, ConnectorError
from .models.config import ServiceConfig
from .services.resolver import resolve_buckets
from .services.sync_service import SyncService


def setup_logging(config: ServiceConfig, log_file: Optional[str] = None):
    """Configure logging for the connector. Logs always go to stderr, stdout carries pages."""
    logger.remove()

    if config.log_json:
        logger.add(sys.stderr, serialize=True, level=config.log_level)
    else:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=config.log_level
        )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG"
        )


def read_payload(args: List[str]) -> str:
    """Return the sync payload from the first argument, or stdin when absent or '-'."""
    if args and args[0] != '-':
        return args[0]
    if sys.stdin is None or sys.stdin.isatty():
        return ''
    return sys.stdin.read()


def build_sink(config: ServiceConfig) -> CallbackSink:
    """Pick the host callback client when a URL is configured, stdout otherwise."""
    if config.callback_url:
        logger.info(f"Delivering pages to {config.callback_url}")
        return HostCallbackClient(config.callback_url, max_retries=config.max_retries)
    logger.info("No callback URL configured - writing pages to stdout")
    return StdoutSink()


def run_sync(config: ServiceConfig, payload: str) -> int:
    """Run one sync and map the outcome to an exit code."""
    try:
        SyncService(config).sync(payload, build_sink(config))
        return 0
    except ConnectorError as e:
        logger.error(f"Sync failed: {str(e)}")
        return 1


def run_check(config: ServiceConfig, payload: str) -> int:
    """Build the storage client, test it and resolve buckets without listing any objects."""
    service = SyncService(config)
    try:
        options = service.parse_options(payload)
    except ConfigurationError as e:
        logger.error(f"Check failed: {str(e)}")
        return 1

    try:
        storage = service.storage_factory(options)
        if not storage.test_connection():
            logger.error("Check failed: storage is not reachable with the given options")
            return 1
        buckets = resolve_buckets(options, storage)
    except Exception as e:
        logger.error(f"Check failed: {str(e)}")
        return 1

    logger.info(f"Check passed - {len(buckets)} buckets would be synced")
    for name in buckets:
        logger.info(f"  • {name!r}")
    return 0


def print_help():
    """Print help information for the CLI."""
    help_text = """
Bucket Connector - Command Line Interface

USAGE:
    python -m bucket_connector.main [COMMAND] [PAYLOAD]

COMMANDS:
    sync     Enumerate buckets and deliver object pages (default)
    check    Test the storage connection and resolve the buckets a sync would walk
    help     Show this help message

PAYLOAD:
    JSON options, passed as an argument or on stdin ('-' or omitted):
    {"profile": "default", "region": "us-east-1", "max_keys": 1000, "buckets": ["b1"]}
    Leave out "buckets" to sync every visible bucket.

EXAMPLES:
    python -m bucket_connector.main sync '{"buckets": ["photos"], "max_keys": 500}'
    echo '{"region": "eu-west-1"}' | python -m bucket_connector.main sync
    python -m bucket_connector.main check '{"profile": "audit"}'

ENVIRONMENT VARIABLES:
    CONNECTOR_S3_ENDPOINT      Custom S3 endpoint URL (MinIO etc.)
    CONNECTOR_CALLBACK_URL     Host callback base URL (default: write pages to stdout)
    CONNECTOR_CONCURRENCY      Buckets walked in parallel (default: 1)
    CONNECTOR_MAX_RETRIES      Retries per storage or callback call (default: 3)
    CONNECTOR_STRICT_OPTIONS   Fail on malformed payloads (default: false)
    CONNECTOR_LOG_LEVEL        Log level (default: INFO)
    CONNECTOR_LOG_JSON         Emit JSON log lines on stderr (default: false)
    CONNECTOR_LOG_FILE         Also write DEBUG logs to this file
"""
    print(help_text)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with command line argument handling."""
    argv = sys.argv[1:] if argv is None else argv
    config = ServiceConfig.from_env()
    setup_logging(config, config.log_file)

    command = argv[0].lower() if argv else 'sync'
    args = argv[1:]

    try:
        if command in ["help", "--help", "-h"]:
            print_help()
            return 0
        elif command == "sync":
            return run_sync(config, read_payload(args))
        elif command == "check":
            return run_check(config, read_payload(args))
        else:
            logger.error(f"Unknown command: {command}")
            logger.error("Use 'help' to see available commands")
            print_help()
            return 1

    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down")
        return 130


if __name__ == "__main__":
    sys.exit(main())
