"""Managed identity token provider backed by the instance metadata service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .cancellation import CancellationToken
from .constants import (
    DEFAULT_MAX_RETRY_COUNT,
    DEFAULT_METADATA_ENDPOINT,
    DEFAULT_RESOURCE,
    DEFAULT_RETRY_TIMEOUT_S,
    DEFAULT_TIMEOUT_MS,
    METADATA_API_VERSION,
    METADATA_HEADER,
)
from .errors import OperationCancelledError
from .http import RetryableHttpClient, is_retryable_status
from .types import RetryPolicy, TokenProviderConfig
from .utils import extract_access_token

logger = logging.getLogger("msitoken")


class ManagedIdentityTokenProvider:
    """Fetch access tokens from the instance metadata identity endpoint.

    Token acquisition never raises for an unavailable credential: transport
    failures, retry timeouts, error responses and malformed bodies all end
    in ``None``. Only a cancellation requested by the caller propagates.

    Example:
        ```python
        async with ManagedIdentityTokenProvider() as provider:
            token = await provider.acquire_token()
            if token is None:
                print("Managed identity unavailable")
        ```
    """

    def __init__(
        self,
        *,
        endpoint: str = DEFAULT_METADATA_ENDPOINT,
        resource: str = DEFAULT_RESOURCE,
        api_version: str = METADATA_API_VERSION,
        timeout: int = DEFAULT_TIMEOUT_MS,
        max_retry_count: int = DEFAULT_MAX_RETRY_COUNT,
        retry_timeout: int = DEFAULT_RETRY_TIMEOUT_S,
        http_client: RetryableHttpClient | None = None,
    ) -> None:
        """Initialize the token provider.

        Args:
            endpoint: Token endpoint of the metadata service.
            resource: Audience the token is requested for.
            api_version: Metadata service API version.
            timeout: Per-attempt HTTP timeout in milliseconds.
            max_retry_count: Maximum number of attempts per token request.
            retry_timeout: Overall retry deadline in seconds (0 = none).
            http_client: Retrying client to reuse. One is created if omitted.
        """
        self._config = TokenProviderConfig(
            endpoint=endpoint,
            resource=resource,
            api_version=api_version,
            timeout=timeout,
            retry_policy=RetryPolicy(
                max_retry_count=max_retry_count,
                retry_timeout_seconds=retry_timeout,
            ),
        )
        self._http = http_client or RetryableHttpClient(
            self._config.retry_policy, timeout=self._config.timeout
        )

    @property
    def config(self) -> TokenProviderConfig:
        """The provider configuration."""
        return self._config

    async def __aenter__(self) -> ManagedIdentityTokenProvider:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.close()

    def _query_params(self, object_id: str | None) -> list[tuple[str, str]]:
        params = [("resource", self._config.resource)]
        # User-assigned identities are selected by object ID
        if object_id is not None:
            params.append(("object_id", object_id))
        params.append(("api-version", self._config.api_version))
        return params

    async def acquire_token(
        self,
        object_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> str | None:
        """Fetch an access token for the configured resource.

        Args:
            object_id: Object ID of a user-assigned managed identity. Omit
                for the system-assigned identity.
            cancellation: Caller token that aborts the request.

        Returns:
            The access token, or None if no token could be obtained.

        Raises:
            OperationCancelledError: If ``cancellation`` fired.
        """
        params = self._query_params(object_id)

        def build_request() -> httpx.Request:
            return httpx.Request(
                "GET",
                self._config.endpoint,
                params=params,
                headers=[METADATA_HEADER],
            )

        try:
            response = await self._http.send_with_retry(
                build_request, self._config.retry_policy, cancellation
            )

            if response.is_success:
                token = extract_access_token(response.text)
                if token is None:
                    logger.debug(
                        "Token response from %s has no access token", self._config.endpoint
                    )
                return token

            detail = (
                f"Failed after {self._config.retry_policy.max_retry_count} retries"
                if is_retryable_status(response.status_code)
                else "Received a non-retryable error."
            )
            logger.debug(
                "Access token unavailable: %s (HTTP %d): %s",
                detail,
                response.status_code,
                response.text,
            )
            return None

        except OperationCancelledError:
            if cancellation is not None and cancellation.is_cancelled:
                raise
            logger.debug("Access token request was cancelled", exc_info=True)
            return None
        except Exception as e:
            logger.debug("Access token unavailable: %s", e, exc_info=True)
            return None


async def acquire_token(object_id: str | None = None, **kwargs: Any) -> str | None:
    """Fetch a single access token with a short-lived provider.

    Args:
        object_id: Object ID of a user-assigned managed identity.
        **kwargs: Passed to ManagedIdentityTokenProvider.

    Returns:
        The access token, or None if no token could be obtained.
    """
    async with ManagedIdentityTokenProvider(**kwargs) as provider:
        return await provider.acquire_token(object_id)
