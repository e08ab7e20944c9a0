"""Cancellation scope tied to a component's mounted lifetime."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScopeClosedError(RuntimeError):
    """Raised when work is started on, or finishes after, a closed scope."""


class LifetimeScope:
    """Runs requests as tasks that are cancelled when the owner unmounts."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def spawn(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        """Start a task owned by this scope."""
        if self._closed:
            coro.close()
            raise ScopeClosedError(f"{self.name} is no longer mounted")
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Await a scoped task; fail if the scope closed while it ran."""
        task = self.spawn(coro)
        try:
            result = await task
        except asyncio.CancelledError:
            if self._closed and not caller_cancelled():
                raise ScopeClosedError(f"{self.name} unmounted mid-request") from None
            raise
        if self._closed:
            logger.debug("Discarding late result in %s", self.name)
            raise ScopeClosedError(f"{self.name} unmounted mid-request")
        return result

    async def close(self) -> None:
        """Cancel every outstanding task and refuse new work."""
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.debug("Task in %s failed during shutdown", self.name)
        self._tasks.clear()


def caller_cancelled() -> bool:
    """Return True when the running task itself has been asked to cancel."""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0
