"""Exceptions raised by usagestats collaborators."""

from __future__ import annotations


class TransportError(Exception):
    """Delivering a report to the collection endpoint failed.

    Covers network errors, timeouts, and non-success responses.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
