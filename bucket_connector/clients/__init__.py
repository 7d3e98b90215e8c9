# Client packages
from .base import StorageClient
from .s3_manager import S3Manager
from .callback import CallbackSink, HostCallbackClient, StdoutSink

__all__ = ['StorageClient', 'S3Manager', 'CallbackSink', 'HostCallbackClient', 'StdoutSink']
