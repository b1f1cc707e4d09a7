"""Exceptions raised by the LNbits Scrum client."""

from __future__ import annotations


class ScrumError(Exception):
    """Base class for all lnbits-scrum errors."""


class ConfigurationError(ScrumError):
    """No usable authentication method was configured."""


class UpstreamError(ScrumError):
    """A call to the Scrum extension API failed.

    Wraps either the ``detail`` message reported by the remote service or the
    transport failure message, prefixed with the operation that failed.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Failed to {operation}: {detail}")
