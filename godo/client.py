"""
HTTP client for a running godo server.
"""

from typing import Optional
import logging

import httpx

from godo.config import get_settings

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """The server could not be reached."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"{url}: {cause}")
        self.url = url
        self.cause = cause


class TodoClient:
    """Talks to the create and list endpoints of a godo server."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url or get_settings().server_url
        self._client = httpx.Client(base_url=self.base_url, transport=transport)

    def __enter__(self) -> "TodoClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ClientError(f"{method} {self.base_url}{path}", e) from e

    def add_todo(self, list_name: str, body: str) -> httpx.Response:
        """Add a todo to a list on the server."""
        payload = {"list": list_name, "todo": body}
        logger.debug(f"Creating todo: {payload}")
        return self._request("POST", "/create", json=payload)

    def list_todos(self) -> httpx.Response:
        """Every todo on the server, grouped by list."""
        return self._request("GET", "/todos")
