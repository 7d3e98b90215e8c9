"""
Callback sinks that receive descriptor pages from the sync engine.

The engine calls ``deliver`` once per listing page. What a sink returns is
never used for control flow; an exception raised from ``deliver`` is logged
by the walker and the walk goes on with the next page.
"""
import json
import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TextIO

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from loguru import logger

from ..exceptions import CallbackError
from ..models.data_models import ObjectDescriptor


class CallbackSink(ABC):
    """Consumer-side receiver of descriptor pages."""

    @abstractmethod
    def deliver(self, page: List[ObjectDescriptor]) -> Any:
        """Receive one page of descriptors, in provider order."""
        pass


class HostCallbackClient(CallbackSink):
    """
    HTTP client pushing descriptor pages to the host's callback endpoint.

    Each page is sent as ``{"response": [descriptor, ...]}`` in a single POST.
    """

    def __init__(self, base_url: str, timeout: int = 30, max_retries: int = 3):
        """
        Initialize the callback client with base URL and configuration.

        Args:
            base_url: Base URL of the host callback server
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries

        self.session = requests.Session()

        retry_strategy = Retry(
            total=max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "POST"],
            backoff_factor=1
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make HTTP request with error handling and logging.

        Raises:
            CallbackError: If request fails after retries
        """
        url = f"{self.base_url}{endpoint}"

        try:
            logger.debug(f"Making {method} request to {url}")
            response = self.session.request(
                method=method,
                url=url,
                timeout=self.timeout,
                **kwargs
            )
            logger.debug(f"Response status: {response.status_code}")
            response.raise_for_status()
            return response

        except requests.exceptions.RequestException as e:
            raise CallbackError(f"Callback request failed: {method} {url} - {str(e)}") from e

    def deliver(self, page: List[ObjectDescriptor]) -> Dict[str, Any]:
        """
        Push one page of descriptors to the host.

        Returns:
            Decoded JSON acknowledgment, empty dict when the host sends no body

        Raises:
            CallbackError: If the host cannot be reached or rejects the page
        """
        response = self._make_request(
            method="POST",
            endpoint="/callback",
            json={"response": [descriptor.to_dict() for descriptor in page]}
        )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    def health_check(self) -> bool:
        """
        Check if the host callback server is reachable.

        Returns:
            True if server is healthy, False otherwise
        """
        try:
            response = self._make_request(method="GET", endpoint="/")
            return response.status_code == 200
        except CallbackError as e:
            logger.warning(f"Callback host health check failed: {str(e)}")
            return False


class StdoutSink(CallbackSink):
    """Writes every page as one JSON line, for local runs without a host."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self._lock = threading.Lock()

    def deliver(self, page: List[ObjectDescriptor]) -> None:
        line = json.dumps({"response": [descriptor.to_dict() for descriptor in page]})
        stream = self.stream or sys.stdout
        with self._lock:
            stream.write(line + "\n")
            stream.flush()
