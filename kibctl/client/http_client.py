"""
HTTP client module for kibctl.

This module provides the gateway every other component uses to talk to the
Kibana API. It wraps an httpx client configured with the server base URL and
basic auth credentials, and turns failures into kibctl exceptions: transport
problems become ``TransportError`` and non-2xx answers become ``APIError``
carrying the status and the response body verbatim.

Requests are sent once; there is no retry policy.
"""
import time
from typing import Any, Dict, Optional, Tuple

import httpx
import structlog

from kibctl import __version__
from kibctl.config import Settings
from kibctl.errors import APIError, TransportError

# Constants
DEFAULT_USER_AGENT = f"kibctl/{__version__}"
DEFAULT_HEADERS = {
    "Accept": "application/json",
    # Kibana rejects writes without this header (CSRF protection)
    "kbn-xsrf": "true",
}


class KibanaHTTPClient:
    """
    HTTP client for the Kibana saved-object API.

    This class provides a thin wrapper around ``httpx.Client`` that attaches
    authentication and the headers Kibana expects, logs each round trip and
    maps errors to kibctl exceptions.
    """

    def __init__(
        self,
        host: str,
        auth: Optional[Tuple[str, str]] = None,
        user_agent: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[Any] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            host: Base URL of the Kibana server (e.g. ``https://kibana:5601``)
            auth: Optional ``(username, password)`` pair for basic auth
            user_agent: User agent string to use for requests
            default_headers: Headers added to (or overriding) the defaults
            transport: Optional httpx transport, used to stub the server
            logger: Optional structlog logger used for diagnostics
        """
        self.host = host.rstrip("/")
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.log = logger or structlog.get_logger(__name__)

        # Set up default headers
        self.default_headers = {**DEFAULT_HEADERS, **(default_headers or {})}
        if "User-Agent" not in self.default_headers:
            self.default_headers["User-Agent"] = self.user_agent

        # Create HTTP client
        self.client = httpx.Client(
            base_url=self.host,
            auth=auth,
            headers=self.default_headers,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[Any] = None,
    ) -> "KibanaHTTPClient":
        """Build a client for the host and credentials held in ``settings``."""
        return cls(
            settings.require_host(),
            auth=settings.auth,
            transport=transport,
            logger=logger,
        )

    def __enter__(self) -> "KibanaHTTPClient":
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the context manager."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def request(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Send a single request to the Kibana API.

        Args:
            method: HTTP method
            path: Path relative to the host (e.g. ``/api/saved_objects/_find``)
            action: Description of the operation, used in error messages
            params: Optional query parameters
            content: Optional raw request body
            headers: Optional headers to include in the request

        Returns:
            httpx.Response: The 2xx response, body already read

        Raises:
            TransportError: If the request could not complete
            APIError: If the server answered with a non-2xx status
        """
        url = f"{self.host}{path}"
        start_time = time.time()
        try:
            response = self.client.request(
                method,
                path,
                params=params,
                content=content,
                headers=headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.log.debug("HTTP request failed", method=method, url=url, error=str(e))
            raise TransportError(method, url, str(e) or type(e).__name__) from e

        elapsed = time.time() - start_time
        self.log.debug(
            "HTTP request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            elapsed_seconds=round(elapsed, 3),
        )

        if not response.is_success:
            raise APIError(
                action,
                response.status_code,
                response.reason_phrase,
                response.text,
            )
        return response

    def get(
        self,
        path: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Make a GET request to the API.

        Args:
            path: Path relative to the host
            action: Description of the operation, used in error messages
            params: Optional query parameters

        Returns:
            httpx.Response: HTTP response
        """
        return self.request("GET", path, action, params=params)

    def post(
        self,
        path: str,
        action: str,
        content: bytes,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        POST a JSON payload to the API.

        Args:
            path: Path relative to the host
            action: Description of the operation, used in error messages
            content: JSON request body, sent verbatim
            params: Optional query parameters

        Returns:
            httpx.Response: HTTP response
        """
        return self.request(
            "POST",
            path,
            action,
            params=params,
            content=content,
            headers={"Content-Type": "application/json"},
        )
