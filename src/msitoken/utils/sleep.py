"""Sleep utility for the managed identity token probe."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cancellation import LinkedCancellation


async def sleep(seconds: float, cancellation: LinkedCancellation | None = None) -> bool:
    """Sleep for the specified number of seconds unless cancelled.

    Args:
        seconds: Number of seconds to sleep.
        cancellation: Condition that wakes the sleep early when it fires.

    Returns:
        True if the full delay elapsed, False if the sleep was interrupted.
    """
    if cancellation is None:
        await asyncio.sleep(seconds)
        return True

    try:
        await asyncio.wait_for(cancellation.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return True
    return False
