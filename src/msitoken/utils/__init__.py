"""Utility functions for the managed identity token probe."""

from .sleep import sleep
from .token_utils import extract_access_token

__all__ = ["extract_access_token", "sleep"]
