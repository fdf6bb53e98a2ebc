"""HTTP transport for built requests."""
import logging
from typing import Any, Optional

import requests
from requests.auth import HTTPBasicAuth

from superdriver.builder.request_builder import FORM, HttpRequest
from superdriver.errors import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Executes HttpRequests with a requests Session."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 30):
        """Initialize transport."""
        self.session = session or requests.Session()
        self.timeout = timeout

    def execute(self, request: HttpRequest) -> Any:
        """
        Execute a request.

        Args:
            request: Built request

        Returns:
            Parsed JSON response body, or None for an empty body

        Raises:
            TransportError: Connection failure, HTTP error status or invalid JSON
        """
        query = f"?{request.query_string()}" if request.query else ""
        logger.debug(f"{request.method.upper()} {request.url}{query}")
        logger.debug(f"  headers: {request.headers}")
        if request.body:
            logger.debug(f"  body: {request.body}")

        kwargs = {
            "params": request.query or None,
            "headers": request.headers,
            "timeout": self.timeout,
        }
        if request.auth:
            kwargs["auth"] = HTTPBasicAuth(*request.auth)
        if request.body is not None:
            if request.content_type == FORM:
                kwargs["data"] = request.body
            else:
                kwargs["json"] = request.body

        try:
            response = self.session.request(request.method.upper(), request.url, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise TransportError(request.method, request.url, str(e)) from e

        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(request.method, request.url, f"invalid JSON response: {e}") from e

        logger.debug(f"HTTP response: {body}")
        return body
