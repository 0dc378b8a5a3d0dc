"""Fire-and-forget background work with a timeout and logged failures.

Used for outbound side effects (e.g. password reset emails) that must never
block or fail the HTTP response that triggered them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from medboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class BackgroundTaskRunner:
    """Spawns coroutines detached from the caller and keeps strong references until done.

    Each task runs under asyncio.wait_for(timeout). Timeouts and exceptions are
    logged as warnings and swallowed; they never reach the caller.
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self._timeout_seconds = timeout_seconds
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def spawn(self, factory: Callable[[], Awaitable[None]], description: str) -> None:
        """Schedule factory() on the running loop; return immediately."""
        task = asyncio.create_task(self._run(factory, description))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, factory: Callable[[], Awaitable[None]], description: str) -> None:
        try:
            await asyncio.wait_for(factory(), timeout=self._timeout_seconds)
        except TimeoutError:
            logger.warning(
                "Background task timed out after %.1fs: %s",
                self._timeout_seconds,
                description,
            )
        except Exception as exc:
            logger.warning("Background task failed: %s (%s)", description, exc)

    async def wait_idle(self) -> None:
        """Wait for all currently scheduled tasks (shutdown and tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
