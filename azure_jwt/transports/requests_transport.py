"""HTTP transport built on requests."""

from __future__ import annotations

import asyncio
from typing import Optional

import requests
import structlog

from azure_jwt.core.transport import HttpResponse, HttpTransport
from azure_jwt.exceptions import MalformedKeySetError, NetworkError

log = structlog.get_logger()


class RequestsTransport(HttpTransport):
    """Fetches JSON documents with ``requests``.

    The blocking call runs in the default thread pool so the event loop is
    free while waiting on the provider.

    Args:
        session: Optional requests.Session to reuse connections
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session

    async def get_json(self, url: str, timeout: float) -> HttpResponse:
        def _fetch() -> HttpResponse:
            """Synchronous GET using requests."""
            getter = self._session.get if self._session is not None else requests.get
            response = getter(url, timeout=timeout, headers={"Accept": "application/json"})
            if not 200 <= response.status_code < 300:
                return HttpResponse(status_code=response.status_code)
            try:
                body = response.json()
            except ValueError as e:
                raise MalformedKeySetError(f"Response from '{url}' is not JSON") from e
            return HttpResponse(status_code=response.status_code, body=body)

        try:
            return await asyncio.to_thread(_fetch)
        except requests.Timeout as e:
            log.warning("http_request_timeout", url=url, timeout=timeout)
            raise NetworkError(url, f"timed out after {timeout}s") from e
        except requests.RequestException as e:
            log.warning("http_request_failed", url=url, error=str(e))
            raise NetworkError(url, str(e)) from e
