"""HTTP layer for the managed identity token probe.

- RetryableHttpClient: sends requests with exponential backoff retries
- is_retryable_status: retryable status classification
"""

from .retry_client import RetryableHttpClient, is_retryable_status

__all__ = ["RetryableHttpClient", "is_retryable_status"]
