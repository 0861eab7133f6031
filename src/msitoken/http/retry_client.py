"""HTTP client with metadata-service retry logic."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx

from ..cancellation import CancellationToken, LinkedCancellation
from ..constants import DEFAULT_TIMEOUT_MS, RETRY_TIMEOUT_ERROR
from ..errors import OperationCancelledError, TimeoutError, TransportExhaustedError
from ..types import AttemptOutcome, RequestAttempt, RetryPolicy
from ..utils.sleep import sleep

logger = logging.getLogger("msitoken")

RequestFactory = Callable[[], httpx.Request]
AttemptCallback = Callable[[RequestAttempt], Any]


def is_retryable_status(status_code: int) -> bool:
    """Check whether a status code is worth retrying.

    404, 429 and every 5xx code are retryable. The metadata service answers
    404 while the identity is still being provisioned.

    Args:
        status_code: The HTTP status code.

    Returns:
        True if the request should be retried.
    """
    return status_code in (404, 429) or 500 <= status_code <= 599


def _classify(response: httpx.Response) -> AttemptOutcome:
    if response.is_success:
        return AttemptOutcome.SUCCESS
    if is_retryable_status(response.status_code):
        return AttemptOutcome.RETRYABLE_FAILURE
    return AttemptOutcome.NON_RETRYABLE_FAILURE


class RetryableHttpClient:
    """HTTP client that retries requests with exponential backoff.

    Implements the retry guidance for instance metadata services: retry on
    404, 429 and 5xx, wait ``base ** attempt`` more seconds after each
    failed attempt, and stop after ``max_retry_count`` attempts or when the
    optional retry timeout elapses.

    The underlying ``httpx.AsyncClient`` is created on first use and reused
    for every call, so one instance can serve concurrent callers.

    Attributes:
        policy: Default retry policy.
        timeout: Per-attempt HTTP timeout in milliseconds.
        wait_before_retry: Whether to actually sleep between attempts.
            Tests turn this off; backoff is still computed and cancellation
            still checked.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        timeout: int = DEFAULT_TIMEOUT_MS,
        wait_before_retry: bool = True,
        on_attempt: AttemptCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the retrying client.

        Args:
            policy: Default retry policy. Defaults to ``RetryPolicy()``.
            timeout: Per-attempt HTTP timeout in milliseconds.
            wait_before_retry: Sleep between attempts. Disable in tests.
            on_attempt: Called with a RequestAttempt after each attempt.
            transport: Custom httpx transport, mainly for tests.
        """
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self.wait_before_retry = wait_before_retry
        self._on_attempt = on_attempt
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> RetryableHttpClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Returns:
            The HTTP client instance.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout / 1000),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _report(self, attempt: RequestAttempt) -> None:
        logger.debug(
            "Metadata request attempt %d: %s (status=%s, backoff=%s)",
            attempt.attempt,
            attempt.outcome.value,
            attempt.status_code,
            attempt.backoff_seconds,
        )
        if self._on_attempt is not None:
            self._on_attempt(attempt)

    async def send_with_retry(
        self,
        request_factory: RequestFactory,
        policy: RetryPolicy | None = None,
        cancellation: CancellationToken | None = None,
    ) -> httpx.Response:
        """Send a request, retrying transient failures.

        A response is returned as soon as it is successful, not retryable,
        or produced by the last allowed attempt. Error statuses are returned,
        not raised; the caller decides what they mean.

        Args:
            request_factory: Builds a fresh request for every attempt.
            policy: Retry policy for this call. Defaults to ``self.policy``.
            cancellation: Caller token that aborts the retry loop.

        Returns:
            The final HTTP response.

        Raises:
            TransportExhaustedError: If the last attempt failed at the
                network level.
            TimeoutError: If the policy's retry timeout elapsed.
            OperationCancelledError: If ``cancellation`` fired.
        """
        policy = policy or self.policy
        client = await self._get_client()

        timeout_token = CancellationToken()
        timer: asyncio.TimerHandle | None = None
        if policy.retry_timeout_seconds > 0:
            timer = timeout_token.cancel_after(policy.retry_timeout_seconds)
        linked = LinkedCancellation(timeout_token, cancellation)

        try:
            attempt = 0
            backoff = 0
            status_code: int | None

            while True:
                attempt += 1
                last_attempt = attempt == policy.max_retry_count

                try:
                    response = await linked.run(client.send(request_factory()))
                except httpx.TransportError as e:
                    if last_attempt:
                        self._report(RequestAttempt(attempt, AttemptOutcome.TRANSPORT_ERROR))
                        raise TransportExhaustedError(
                            f"Network error after {attempt} attempts: {e}"
                        ) from e
                    outcome = AttemptOutcome.TRANSPORT_ERROR
                    status_code = None
                else:
                    outcome = _classify(response)
                    status_code = response.status_code
                    if outcome is not AttemptOutcome.RETRYABLE_FAILURE or last_attempt:
                        self._report(RequestAttempt(attempt, outcome, status_code))
                        return response
                    await response.aclose()

                backoff += policy.backoff_for(attempt)
                self._report(RequestAttempt(attempt, outcome, status_code, backoff))

                if self.wait_before_retry:
                    await sleep(backoff, linked)
                linked.raise_if_cancelled()

        except OperationCancelledError as e:
            if timeout_token.is_cancelled:
                raise TimeoutError(RETRY_TIMEOUT_ERROR) from e
            raise
        finally:
            if timer is not None:
                timer.cancel()
