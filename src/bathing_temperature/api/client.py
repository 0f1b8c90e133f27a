"""
Base HTTP client shared by the upstream and downstream APIs.

Handles session management, retry policy and request logging.
"""

import logging
from typing import Dict, Any, Optional, Sequence

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

from ..core import constants


class APIClient:
    """Base client for JSON-over-HTTP APIs."""

    def __init__(
        self,
        base_url: str,
        timeout: int = constants.DEFAULT_TIMEOUT,
        max_retries: int = constants.DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None,
        retry_methods: Sequence[str] = ("GET",)
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts (0 disables retries)
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
            retry_methods: HTTP methods the retry policy applies to
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        # Final responses are returned as-is once retries are exhausted so
        # callers can map the status code themselves
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=list(retry_methods),
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self._update_headers()

    def _update_headers(self) -> None:
        """Set default session headers."""
        self.session.headers.update({
            "Accept": "application/json"
        })

    def _url(self, endpoint: str) -> str:
        """Build an absolute URL for an endpoint relative to the base URL."""
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request to API.

        The response is returned whatever its status code.

        Args:
            method: HTTP method (GET, POST, PATCH, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            requests.exceptions.RequestException: On transport failure
        """
        url = self._url(endpoint)
        kwargs.setdefault("verify", self.verify_ssl)
        kwargs.setdefault("timeout", self.timeout)

        self.logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method=method, url=url, **kwargs)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {method} {url} - {e}")
            raise

        self.logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def response_detail(response: requests.Response, limit: int = 200) -> str:
    """Short excerpt of a response body for error messages."""
    text = response.text or ""
    return text[:limit]


def json_headers(content_type: str) -> Dict[str, Any]:
    """Request headers for a JSON body of the given media type."""
    return {"Content-Type": content_type}
