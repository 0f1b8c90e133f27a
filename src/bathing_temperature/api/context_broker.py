"""
NGSI-LD context broker client.

Creates and merges entities, mapping broker responses onto the error taxonomy.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests  # type: ignore

from .client import APIClient, json_headers, response_detail
from ..core.errors import DownstreamError, EntityAlreadyExistsError, EntityNotFoundError
from ..core import constants


class ContextBrokerAPI(APIClient):
    """Entity operations against an NGSI-LD context broker."""

    def __init__(
        self,
        base_url: str,
        timeout: int = constants.DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize context broker client.

        Args:
            base_url: Broker URL (without the /ngsi-ld/v1 suffix)
            timeout: Per-call timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            verify_ssl=verify_ssl,
            logger=logger
        )

    def create_entity(self, entity: Dict[str, Any]) -> None:
        """
        Create a new entity.

        Args:
            entity: Complete entity including id, type and @context

        Raises:
            EntityAlreadyExistsError: If an entity with the same id exists
            DownstreamError: On any other failure
        """
        endpoint = constants.NGSI_LD_ENTITIES_PATH
        response = self._send("POST", endpoint, entity)

        if response.status_code == 201:
            return

        url = self._url(endpoint)
        if response.status_code == 409:
            raise EntityAlreadyExistsError(
                f"entity {entity.get('id')} already exists",
                status_code=409,
                url=url
            )

        raise DownstreamError(
            f"failed to create entity {entity.get('id')}: "
            f"{response.status_code} {response_detail(response)}",
            status_code=response.status_code,
            url=url
        )

    def merge_entity(self, entity_id: str, fragment: Dict[str, Any]) -> None:
        """
        Merge a fragment into an existing entity.

        Args:
            entity_id: Entity id
            fragment: Properties (and @context) to merge

        Raises:
            EntityNotFoundError: If the entity does not exist
            DownstreamError: On any other failure
        """
        endpoint = f"{constants.NGSI_LD_ENTITIES_PATH}/{quote(entity_id, safe=':')}"
        response = self._send("PATCH", endpoint, fragment)

        if response.status_code in (200, 204):
            return

        url = self._url(endpoint)
        if response.status_code == 404:
            raise EntityNotFoundError(f"entity {entity_id} not found", status_code=404, url=url)

        raise DownstreamError(
            f"failed to merge entity {entity_id}: "
            f"{response.status_code} {response_detail(response)}",
            status_code=response.status_code,
            url=url
        )

    def _send(self, method: str, endpoint: str, body: Dict[str, Any]) -> requests.Response:
        try:
            return self._make_request(
                method,
                endpoint,
                json=body,
                headers=json_headers(constants.NGSI_LD_CONTENT_TYPE)
            )
        except requests.exceptions.RequestException as e:
            raise DownstreamError(f"{method} {self._url(endpoint)} failed: {e}", url=self._url(endpoint)) from e
