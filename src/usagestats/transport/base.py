"""Base transport interface.

Transports have a narrow interface: send(request) either returns or raises
TransportError. They must not touch the stats database or the timestamp.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from usagestats.models.types import HttpRequest


class TransportBase(ABC):
    """Abstract base class for report transports."""

    @abstractmethod
    def send(self, request: HttpRequest) -> None:
        """Deliver a request.

        Args:
            request: URL, method, headers and JSON body to send.

        Raises:
            TransportError: If delivery failed for any reason.
        """
        pass
