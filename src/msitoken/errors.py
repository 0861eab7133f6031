"""Error hierarchy for the managed identity token probe."""

from __future__ import annotations


class MsiTokenError(Exception):
    """Base exception for all token probe errors."""

    pass


class TransportExhaustedError(MsiTokenError):
    """Network-level failure that persisted through every retry attempt."""

    pass


class TimeoutError(MsiTokenError):
    """The overall retry timeout elapsed before a final response."""

    pass


class OperationCancelledError(MsiTokenError):
    """The caller's cancellation token fired.

    Attributes:
        token: The cancellation token that was cancelled.
    """

    def __init__(self, message: str = "Operation was cancelled", token: object = None) -> None:
        self.token = token
        super().__init__(message)
