import asyncio
import logging
from typing import Awaitable, Callable
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.5
DEFAULT_MAX_ATTEMPTS = 10


def expected_path(url: str) -> str:
    return urlsplit(url).path


class PlayerWatchdog:
    """
    Polls a mounted player's observable location a bounded number of times.

    If the player is seen on a path other than the one it was mounted with,
    ``on_failure(handle)`` is called once and the watchdog stops. A location
    that cannot be read counts as healthy.
    """

    def __init__(
        self,
        surface,
        handle: str,
        url: str,
        on_failure: Callable[[str], Awaitable[None]],
        interval: float = DEFAULT_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.surface = surface
        self.handle = handle
        self.expected_path = expected_path(url)
        self.on_failure = on_failure
        self.interval = interval
        self.max_attempts = max_attempts
        self.attempts = 0
        self.tripped = False
        self._task: asyncio.Task | None = None

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        if self.armed or self.max_attempts <= 0:
            return
        self._task = asyncio.create_task(self._run())

    def disarm(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        # a failure callback tearing the player down runs inside the task
        if task is asyncio.current_task():
            return
        task.cancel()

    async def _navigated_away(self) -> bool:
        try:
            location = await self.surface.location(self.handle)
        except Exception:
            logger.debug("Player %s location unreadable", self.handle, exc_info=True)
            return False

        if not location:
            return False

        return self.expected_path not in location

    async def _run(self) -> None:
        while self.attempts < self.max_attempts:
            await asyncio.sleep(self.interval)
            self.attempts += 1

            if await self._navigated_away():
                self.tripped = True
                logger.info(
                    "Player %s left %s after %s checks",
                    self.handle,
                    self.expected_path,
                    self.attempts,
                )
                await self.on_failure(self.handle)
                return

        logger.debug("Watchdog for %s disarmed after %s checks", self.handle, self.attempts)
