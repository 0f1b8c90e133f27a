"""
Havochvatten "badplatsen" API client.

Fetches bathing site details and bathing water profiles per location code.
"""

import logging
from typing import Any, List, Optional, Tuple

import requests  # type: ignore

from .client import APIClient
from ..core.errors import DecodeError, FetchError
from ..core import constants
from ..models import BathingProfile, Detail


class HavochvattenAPI(APIClient):
    """Read-only client for bathing site data."""

    def __init__(
        self,
        base_url: str = constants.DEFAULT_HOV_URL,
        timeout: int = constants.DEFAULT_TIMEOUT,
        max_retries: int = constants.DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )

    @property
    def source(self) -> str:
        """Source label attached to sampled temperatures."""
        return self.base_url

    def get_json(self, endpoint: str) -> Tuple[Optional[Any], int]:
        """
        Fetch a JSON document.

        Args:
            endpoint: API endpoint relative to the base URL

        Returns:
            Tuple of (decoded body, status code). The body is None for 404.

        Raises:
            FetchError: On transport failure or any status other than 200 and 404
            DecodeError: If the body is not valid JSON
        """
        url = self._url(endpoint)

        try:
            response = self._make_request("GET", endpoint)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"request failed: {e}", url=url) from e

        if response.status_code == 404:
            self.logger.debug(f"{url} not found")
            return None, response.status_code

        if response.status_code != 200:
            raise FetchError(
                f"expectation failed: expected status code 200, but got {response.status_code}",
                status_code=response.status_code,
                url=url
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"malformed JSON from {url}: {e}", url=url) from e

        return body, response.status_code

    def fetch_details(self) -> List[Detail]:
        """
        Fetch details of all bathing sites.

        Returns:
            List of details (empty if the listing is not found)
        """
        self.logger.info("Fetching all bathing site details")
        body, _ = self.get_json(constants.DETAIL_PATH)
        if body is None:
            return []

        if not isinstance(body, list):
            raise DecodeError("expected a list of details", url=self._url(constants.DETAIL_PATH))

        return [self._decode(Detail.from_dict, item, constants.DETAIL_PATH) for item in body]

    def fetch_detail(self, nuts_code: str) -> Optional[Detail]:
        """
        Fetch details for one bathing site.

        Args:
            nuts_code: Location code (case-insensitive)

        Returns:
            Detail, or None if the site is unknown
        """
        endpoint = f"{constants.DETAIL_PATH}/{nuts_code.upper()}"
        body, _ = self.get_json(endpoint)
        if body is None:
            return None
        return self._decode(Detail.from_dict, body, endpoint)

    def fetch_profile(self, nuts_code: str) -> Optional[BathingProfile]:
        """
        Fetch the bathing water profile for one bathing site.

        Args:
            nuts_code: Location code (case-insensitive)

        Returns:
            Bathing profile, or None if the site has no profile
        """
        endpoint = f"{constants.PROFILE_PATH}/{nuts_code.upper()}"
        body, _ = self.get_json(endpoint)
        if body is None:
            return None
        return self._decode(BathingProfile.from_dict, body, endpoint)

    def _decode(self, factory, body: Any, endpoint: str):
        if not isinstance(body, dict):
            raise DecodeError(
                f"expected a JSON object, got {type(body).__name__}",
                url=self._url(endpoint)
            )
        try:
            return factory(body)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"invalid record from {self._url(endpoint)}: {e}", url=self._url(endpoint)) from e
