"""Abstract HTTP transport used by discovery clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HttpResponse:
    """Status and decoded JSON body of a GET request."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(ABC):
    """Read-only JSON-over-HTTP capability.

    Implementations:
        - RequestsTransport: ``requests`` run in a worker thread
    """

    @abstractmethod
    async def get_json(self, url: str, timeout: float) -> HttpResponse:
        """GET ``url`` and decode the JSON body.

        Args:
            url: Absolute URL to fetch
            timeout: Seconds before the request is abandoned

        Returns:
            HttpResponse; ``body`` is None when the status is not a success

        Raises:
            NetworkError: On connection errors and timeouts
            MalformedKeySetError: If a success response is not JSON
        """
