"""Managed identity token probe.

Fetches an access token from the local instance metadata identity endpoint,
retrying transient failures with exponential backoff, and hands it to a
database session check.

Example:
    ```python
    import asyncio
    from msitoken import ManagedIdentityTokenProvider

    async def main():
        async with ManagedIdentityTokenProvider() as provider:
            token = await provider.acquire_token()
            print("token available" if token else "token unavailable")

    asyncio.run(main())
    ```
"""

from .cancellation import CancellationToken, LinkedCancellation
from .constants import (
    DEFAULT_MAX_RETRY_COUNT,
    DEFAULT_METADATA_ENDPOINT,
    DEFAULT_RESOURCE,
    DEFAULT_RETRY_TIMEOUT_S,
    DEFAULT_TIMEOUT_MS,
    DELTA_BACKOFF_S,
    METADATA_API_VERSION,
)
from .errors import (
    MsiTokenError,
    OperationCancelledError,
    TimeoutError,
    TransportExhaustedError,
)
from .http import RetryableHttpClient, is_retryable_status
from .provider import ManagedIdentityTokenProvider, acquire_token
from .session import run_version_query
from .types import AttemptOutcome, RequestAttempt, RetryPolicy, TokenProviderConfig
from .utils import extract_access_token

__version__ = "0.1.0"

__all__ = [
    # Provider
    "ManagedIdentityTokenProvider",
    "acquire_token",
    "run_version_query",
    # HTTP
    "RetryableHttpClient",
    "is_retryable_status",
    "extract_access_token",
    # Cancellation
    "CancellationToken",
    "LinkedCancellation",
    # Types
    "AttemptOutcome",
    "RequestAttempt",
    "RetryPolicy",
    "TokenProviderConfig",
    # Constants
    "DEFAULT_MAX_RETRY_COUNT",
    "DEFAULT_METADATA_ENDPOINT",
    "DEFAULT_RESOURCE",
    "DEFAULT_RETRY_TIMEOUT_S",
    "DEFAULT_TIMEOUT_MS",
    "DELTA_BACKOFF_S",
    "METADATA_API_VERSION",
    # Errors
    "MsiTokenError",
    "TransportExhaustedError",
    "TimeoutError",
    "OperationCancelledError",
    # Version
    "__version__",
]
