import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

from livebracket.utils.logging import logger

TimedCallback = Callable[[], Awaitable[None]]


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, name: str, callback: TimedCallback) -> None: ...


class AsyncioScheduler:
    """
    Runs fire-and-forget callbacks on the running event loop after a delay.

    References to pending tasks are held until they finish, otherwise the event loop may
    garbage collect them mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    async def _run(self, delay_seconds: float, name: str, callback: TimedCallback) -> None:
        await asyncio.sleep(delay_seconds)
        try:
            await callback()
        except Exception as exc:
            logger.error(f"Timed callback {name} failed: {exc}")

    def call_later(self, delay_seconds: float, name: str, callback: TimedCallback) -> None:
        task = asyncio.create_task(self._run(delay_seconds, name, callback), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()


async def run_periodically(interval_seconds: float, name: str, callback: TimedCallback) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await callback()
        except Exception as exc:
            logger.error(f"Periodic task {name} failed: {exc}")
