"""
Shared HTTP plumbing for the remote feed clients.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

import httpx

from .config import ClientConfig
from .exceptions import HydroDBError, RemoteUnavailableError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="BaseDataAccessClient")


class BaseDataAccessClient:
    """
    Synchronous httpx client with hydrodb error mapping.

    Every transport or status failure surfaces as a
    :class:`~hydrodb.exceptions.HydroDBError` subclass; subclasses refine
    the mapping through :meth:`_status_error`.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.timeout = self.config.timeout
        self._client = httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self: C) -> C:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _status_error(self, error: httpx.HTTPStatusError) -> HydroDBError:
        status = error.response.status_code
        if status == 404:
            return RemoteUnavailableError(
                f"Resource not found: {error.request.url}", status_code=status
            )
        if status == 429:
            return RemoteUnavailableError("Rate limit exceeded", status_code=status)
        if status >= 500:
            return RemoteUnavailableError(
                "Service temporarily unavailable", status_code=status
            )
        return RemoteUnavailableError(f"HTTP error {status}: {error}", status_code=status)

    def _translate_error(self, error: Exception) -> HydroDBError:
        if isinstance(error, httpx.TimeoutException):
            return RemoteUnavailableError(f"Request timeout after {self.timeout}s")
        if isinstance(error, httpx.HTTPStatusError):
            return self._status_error(error)
        return RemoteUnavailableError(f"Network error: {error}")

    def _make_request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise for any non-success outcome."""
        logger.debug(f"{method} {url}")
        try:
            if method == "POST":
                response = self._client.post(url, **kwargs)
            else:
                response = self._client.get(url, **kwargs)
            response.raise_for_status()
            return response
        except (httpx.TimeoutException, httpx.HTTPStatusError, httpx.RequestError) as e:
            raise self._translate_error(e) from e


@contextmanager
def client_scope(
    client: Optional[C], factory: Callable[[], C]
) -> Iterator[C]:
    """Use ``client`` as given, or create one for the duration of the block."""
    if client is not None:
        yield client
        return
    with factory() as owned:
        yield owned
