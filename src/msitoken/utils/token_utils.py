"""Helpers for reading the metadata service token response."""

from __future__ import annotations

from ..constants import ACCESS_TOKEN_FIELD

_ACCESS_TOKEN_MARKER = f'"{ACCESS_TOKEN_FIELD}":"'


def extract_access_token(body: str | None) -> str | None:
    """Extract the access token from a token response body.

    The body is scanned as text rather than parsed as JSON: the value that
    follows the literal ``"access_token":"`` marker, up to the next double
    quote, is the token.

    Args:
        body: The response body text.

    Returns:
        The token, or None if the marker or its closing quote is missing or
        the token is empty.
    """
    if not body:
        return None

    marker_index = body.find(_ACCESS_TOKEN_MARKER)
    if marker_index < 0:
        return None

    start = marker_index + len(_ACCESS_TOKEN_MARKER)
    end = body.find('"', start)
    if end <= start:
        return None

    return body[start:end]
