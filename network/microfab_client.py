"""
Fabric Network Topology - Component Directory Client

This module provides a read-only client for the live HTTP component directory
of a running network. The directory returns a list of typed components
(identities, peers, orderers and gateways) distinguished by their ``type`` tag.
"""

import logging
from typing import Any, Dict, List, Optional

import requests


COMPONENTS_PATH = '/ak/api/v1/components'


class MicrofabClientError(Exception):
    """Raised when the component directory cannot be read."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


def is_identity(component: Dict[str, Any]) -> bool:
    return component.get('type') == 'identity'


def is_peer(component: Dict[str, Any]) -> bool:
    return component.get('type') == 'fabric-peer'


def is_orderer(component: Dict[str, Any]) -> bool:
    return component.get('type') == 'fabric-orderer'


def is_gateway(component: Dict[str, Any]) -> bool:
    return component.get('type') == 'gateway'


class MicrofabClient:
    """Client for ``GET /ak/api/v1/components`` and ``GET /ak/api/v1/components/:id``."""

    def __init__(self, url: str, verify_tls: bool = True,
                 session: Optional[requests.Session] = None):
        self.url = url.rstrip('/')
        self.verify_tls = verify_tls
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "fabric-registry/1.0",
        })
        self.logger = logging.getLogger(__name__)

    def _get(self, url: str) -> Any:
        try:
            response = self.session.get(url, verify=self.verify_tls)
        except requests.exceptions.RequestException as e:
            raise MicrofabClientError(f"Connection failed: {e}", url)

        if response.status_code >= 400:
            raise MicrofabClientError(f"HTTP {response.status_code}: {response.reason}",
                                      url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MicrofabClientError(f"Invalid JSON response: {e}", url, response.status_code)

    def get_components(self) -> List[Dict[str, Any]]:
        """Fetch every component the directory knows about."""
        url = f"{self.url}{COMPONENTS_PATH}"
        data = self._get(url)
        if not isinstance(data, list):
            raise MicrofabClientError("Expected a list of components", url)
        self.logger.debug(f"Fetched {len(data)} components from {url}")
        return data

    def get_component(self, component_id: str) -> Dict[str, Any]:
        url = f"{self.url}{COMPONENTS_PATH}/{component_id}"
        return self._get(url)
