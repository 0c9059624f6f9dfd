"""
HTTP transport

Handles communication with the OSM API and Nominatim:
- HttpTransport: requests-based, single attempt per call
- MockTransport: replays recorded responses in call order
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union
import requests
from loguru import logger

from .config import APIConfig
from .exceptions import TransportError


@dataclass
class Response:
    """Status code and raw body of an HTTP response"""
    status_code: int
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class Request:
    """A request as seen by a transport"""
    method: str
    url: str
    params: Dict[str, Any] = field(default_factory=dict)


class HttpTransport:
    """Sends requests over HTTP with a shared requests.Session"""

    def __init__(self, config: Optional[APIConfig] = None):
        self.config = config or APIConfig()
        self.timeout = self.config.timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def send(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> Response:
        """
        Issue one HTTP request

        Args:
            method: HTTP method
            url: Absolute URL
            params: Query string parameters

        Returns:
            Response with status code and body

        Raises:
            TransportError: If the request could not be completed
        """
        logger.debug(f"{method} {url} {params or ''}")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timed out after {self.timeout}s: {url}")
            raise TransportError(f"Request to {url} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {url}: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        logger.debug(f"HTTP {response.status_code} from {url}")
        return Response(status_code=response.status_code, body=response.content)


class MockTransport:
    """
    Replays pre-recorded responses in the order they were added

    Every request is recorded in ``requests`` so tests can assert on the
    URLs and parameters that were sent.
    """

    def __init__(self, responses: Optional[Iterable[Union[Response, bytes, str]]] = None):
        self._responses: List[Response] = []
        self.requests: List[Request] = []
        for response in responses or []:
            self.add_response(response)

    def add_response(self, response: Union[Response, bytes, str], status_code: int = 200) -> "MockTransport":
        if isinstance(response, str):
            response = response.encode("utf-8")
        if isinstance(response, bytes):
            response = Response(status_code=status_code, body=response)
        self._responses.append(response)
        return self

    def send(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> Response:
        self.requests.append(Request(method=method, url=url, params=dict(params or {})))
        if not self._responses:
            raise TransportError(f"No response queued for {method} {url}")
        return self._responses.pop(0)
