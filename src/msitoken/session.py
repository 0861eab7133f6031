"""Authenticated database session check using a managed identity token."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

VERSION_QUERY = "SELECT @@VERSION"

# connect(connection_string, access_token) -> DB-API 2.0 connection
ConnectionFactory = Callable[[str, "str | None"], Any]


def run_version_query(
    connect: ConnectionFactory,
    connection_string: str,
    access_token: str | None,
) -> list[Any]:
    """Open a session with the token and run the server version query.

    The driver is supplied by the caller. A ``None`` token is passed through
    unchanged so the factory can fall back to another authentication path.

    Args:
        connect: Factory returning a DB-API 2.0 connection.
        connection_string: Driver connection string.
        access_token: Pre-fetched access token, or None.

    Returns:
        The first column of every returned row.
    """
    conn = connect(connection_string, access_token)
    try:
        cursor = conn.cursor()
        try:
            cursor.execute(VERSION_QUERY)
            return [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()
    finally:
        conn.close()
