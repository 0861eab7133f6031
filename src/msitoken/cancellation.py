"""Cooperative cancellation tokens for the retry engine."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from typing import TypeVar

from .errors import OperationCancelledError

T = TypeVar("T")


class CancellationToken:
    """A caller-controlled cancellation signal.

    The token starts un-fired. Calling :meth:`cancel` fires it and wakes
    every coroutine waiting on it. A fired token never resets.

    Example:
        ```python
        token = CancellationToken()
        task = asyncio.create_task(provider.acquire_token(cancellation=token))
        token.cancel()
        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Whether the token has fired."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Fire the token."""
        self._event.set()

    def cancel_after(self, delay: float) -> asyncio.TimerHandle:
        """Schedule the token to fire after ``delay`` seconds.

        Must be called from a running event loop.

        Args:
            delay: Delay in seconds.

        Returns:
            The timer handle. Cancel it to release the timer early.
        """
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, self.cancel)

    async def wait(self) -> None:
        """Wait until the token fires."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if the token has fired."""
        if self.is_cancelled:
            raise OperationCancelledError(token=self)


class LinkedCancellation:
    """A combined cancellation condition over several tokens.

    Fires as soon as any source token fires. ``None`` sources are ignored,
    so an optional caller token can be linked without special casing.
    """

    def __init__(self, *tokens: CancellationToken | None) -> None:
        self._tokens = tuple(token for token in tokens if token is not None)

    @property
    def is_cancelled(self) -> bool:
        """Whether any source token has fired."""
        return any(token.is_cancelled for token in self._tokens)

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError for the first fired source token.

        Raises:
            OperationCancelledError: With ``token`` set to the fired source.
        """
        for token in self._tokens:
            token.raise_if_cancelled()

    async def wait(self) -> None:
        """Wait until any source token fires.

        With no sources this waits forever; callers bound it with a timeout.
        """
        if not self._tokens:
            await asyncio.get_running_loop().create_future()
            return

        waiters = [asyncio.ensure_future(token.wait()) for token in self._tokens]
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the combined condition fires first.

        The awaitable is cancelled if the condition wins the race. A result
        that is already available when the condition fires is still returned.

        Args:
            awaitable: The operation to guard.

        Returns:
            The awaitable's result.

        Raises:
            OperationCancelledError: If a source token fired first.
        """
        if self.is_cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        watcher = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            watcher.cancel()
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        if task.cancelled():
            self.raise_if_cancelled()
        return task.result()
