"""Type definitions for the managed identity token probe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    DEFAULT_MAX_RETRY_COUNT,
    DEFAULT_METADATA_ENDPOINT,
    DEFAULT_RESOURCE,
    DEFAULT_RETRY_TIMEOUT_S,
    DEFAULT_TIMEOUT_MS,
    DELTA_BACKOFF_S,
    METADATA_API_VERSION,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for metadata requests.

    Attributes:
        max_retry_count: Maximum number of attempts, including the first one.
        retry_timeout_seconds: Overall retry deadline in seconds. 0 disables it.
        backoff_base_seconds: Base of the exponential backoff schedule.
    """

    max_retry_count: int = DEFAULT_MAX_RETRY_COUNT
    retry_timeout_seconds: int = DEFAULT_RETRY_TIMEOUT_S
    backoff_base_seconds: int = DELTA_BACKOFF_S

    def __post_init__(self) -> None:
        if self.max_retry_count < 1:
            raise ValueError(f"max_retry_count must be at least 1, got {self.max_retry_count}")
        if self.retry_timeout_seconds < 0:
            raise ValueError(
                f"retry_timeout_seconds cannot be negative, got {self.retry_timeout_seconds}"
            )
        if self.backoff_base_seconds < 1:
            raise ValueError(
                f"backoff_base_seconds must be at least 1, got {self.backoff_base_seconds}"
            )

    def backoff_for(self, attempt: int) -> int:
        """Delay added to the backoff accumulator after a failed attempt.

        Args:
            attempt: The 1-based attempt number that just failed.

        Returns:
            ``backoff_base_seconds ** attempt``.
        """
        return int(self.backoff_base_seconds**attempt)


class AttemptOutcome(str, Enum):
    """Classification of a single request attempt."""

    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    NON_RETRYABLE_FAILURE = "non_retryable_failure"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class RequestAttempt:
    """Record of one attempt inside a retry loop.

    Attributes:
        attempt: 1-based attempt number.
        outcome: How the attempt was classified.
        status_code: HTTP status code, or None on a transport error.
        backoff_seconds: Accumulated backoff before the next attempt, or None
            if no further attempt follows.
    """

    attempt: int
    outcome: AttemptOutcome
    status_code: int | None = None
    backoff_seconds: int | None = None


@dataclass
class TokenProviderConfig:
    """Configuration for ManagedIdentityTokenProvider.

    Attributes:
        endpoint: Token endpoint of the instance metadata service.
        resource: Audience the token is requested for.
        api_version: Metadata service API version.
        timeout: Per-attempt HTTP timeout in milliseconds.
        retry_policy: Retry configuration.
    """

    endpoint: str = DEFAULT_METADATA_ENDPOINT
    resource: str = DEFAULT_RESOURCE
    api_version: str = METADATA_API_VERSION
    timeout: int = DEFAULT_TIMEOUT_MS
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
