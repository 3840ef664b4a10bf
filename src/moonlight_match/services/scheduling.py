"""Cancellable fixed-interval background task."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)


@dataclass
class RepeatingTask:
    """Run ``callback`` every ``interval_seconds`` until cancelled.

    The first run happens one interval after ``start``. ``cancel`` may be
    called from inside the callback; the loop then exits once it returns.
    """

    callback: Callable[[], Awaitable[None]]
    interval_seconds: float
    name: str = "repeating-task"
    ticks: int = field(default=0, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _cancelled: bool = field(default=False, init=False, repr=False)

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self._task is not None:
            raise RuntimeError(f"{self.name} already started")
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=self.name
        )

    @property
    def running(self) -> bool:
        return (
            self._task is not None and not self._task.done() and not self._cancelled
        )

    def cancel(self) -> None:
        """Stop scheduling further ticks."""
        self._cancelled = True
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait until the loop has exited."""
        if self._task is None:
            return
        with suppress(asyncio.CancelledError):
            await self._task

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval_seconds)
            if self._cancelled:
                break
            self.ticks += 1
            try:
                await self.callback()
            except Exception:
                _logger.exception("%s tick %s failed", self.name, self.ticks)
