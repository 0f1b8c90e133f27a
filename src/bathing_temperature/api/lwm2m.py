"""
LwM2M telemetry endpoint client.

Posts SenML packs describing LwM2M objects.
"""

import logging
from typing import Any, Dict, List, Optional

import requests  # type: ignore

from .client import APIClient, json_headers, response_detail
from ..core.errors import DownstreamError
from ..core import constants


class LwM2MAPI(APIClient):
    """Client for an endpoint accepting SenML encoded LwM2M objects."""

    def __init__(
        self,
        endpoint_url: str,
        content_type: str = constants.SENML_CONTENT_TYPE,
        timeout: int = constants.DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize LwM2M client.

        Args:
            endpoint_url: URL packs are posted to
            content_type: Media type of posted packs
            timeout: Per-call timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=endpoint_url,
            timeout=timeout,
            max_retries=0,
            verify_ssl=verify_ssl,
            logger=logger
        )
        self.content_type = content_type

    def post_pack(self, pack: List[Dict[str, Any]]) -> None:
        """
        Post one SenML pack.

        Args:
            pack: Serializable SenML records

        Raises:
            DownstreamError: On transport failure or any status other than 201
        """
        try:
            response = self._make_request(
                "POST",
                "",
                json=pack,
                headers=json_headers(self.content_type)
            )
        except requests.exceptions.RequestException as e:
            raise DownstreamError(f"POST {self.base_url} failed: {e}", url=self.base_url) from e

        if response.status_code != 201:
            raise DownstreamError(
                f"unexpected response code {response.status_code} {response_detail(response)}",
                status_code=response.status_code,
                url=self.base_url
            )
