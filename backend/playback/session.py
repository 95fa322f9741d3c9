import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from django.conf import settings

from playback.watchdog import DEFAULT_INTERVAL, DEFAULT_MAX_ATTEMPTS, PlayerWatchdog
from providers.base import MediaDescriptor, PlaybackOptions
from providers.exceptions import ResolutionFailure
from providers.registry import ProviderEntry, list_compatible_providers
from providers.resolver import resolve, select_provider

logger = logging.getLogger(__name__)

PLAYER_UNAVAILABLE = "player_unavailable"


class SessionStateError(RuntimeError):
    pass


class PlaybackSession:
    """
    The single player mounted on one client surface.

    Created by its owner (one per player connection) and destroyed with
    ``stop()``. All mutating operations are serialised on one lock.
    """

    class State(str, Enum):
        IDLE = "IDLE"
        LOADING = "LOADING"
        PLAYING = "PLAYING"
        FAILED = "FAILED"

    def __init__(
        self,
        surface,
        store,
        *,
        watchdog_interval: Optional[float] = None,
        watchdog_attempts: Optional[int] = None,
        on_failure: Optional[Callable[["PlaybackSession"], Awaitable[None]]] = None,
    ):
        self.surface = surface
        self.store = store
        self.on_failure = on_failure

        if watchdog_interval is None:
            watchdog_interval = getattr(settings, "WATCHDOG_INTERVAL", DEFAULT_INTERVAL)
        if watchdog_attempts is None:
            watchdog_attempts = getattr(settings, "WATCHDOG_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
        self.watchdog_interval = watchdog_interval
        self.watchdog_attempts = watchdog_attempts

        self.state = self.State.IDLE
        self.descriptor: Optional[MediaDescriptor] = None
        self.options: Optional[PlaybackOptions] = None
        self.provider_key: Optional[str] = None
        self.handle: Optional[str] = None
        self.url: Optional[str] = None
        self.failure: Optional[ResolutionFailure] = None
        self.watchdog: Optional[PlayerWatchdog] = None

        self._lock = asyncio.Lock()

    # ---------- public operations ----------

    async def start(
        self,
        descriptor: MediaDescriptor,
        options: Optional[PlaybackOptions] = None,
        default_provider_key: Optional[str] = None,
    ) -> "PlaybackSession.State":
        async with self._lock:
            await self._teardown()

            self.descriptor = descriptor
            self.options = options or PlaybackOptions()
            self.state = self.State.LOADING

            preferred = default_provider_key or getattr(settings, "DEFAULT_PROVIDER", None)
            try:
                provider = select_provider(descriptor, preferred)
            except ResolutionFailure as failure:
                return self._fail(failure)

            return await self._mount(provider.key)

    async def switch_provider(self, provider_key: str) -> "PlaybackSession.State":
        async with self._lock:
            if self.state == self.State.IDLE or self.descriptor is None:
                raise SessionStateError("Cannot switch provider without an active session")

            await self._release_player()
            self.failure = None
            return await self._mount(provider_key)

    async def report_failure(self, handle: Optional[str] = None) -> "PlaybackSession.State":
        """
        Mark the mounted player as broken. The descriptor and options are
        kept so the caller can move to another provider at the same spot.
        Reports for a player that is no longer mounted are ignored.
        """
        async with self._lock:
            if self.state == self.State.IDLE:
                return self.state
            if handle is not None and handle != self.handle:
                return self.state

            logger.info(
                "Provider %s failed for %s %s",
                self.provider_key,
                self.descriptor.kind.value,
                self.descriptor.id,
            )
            await self._release_player()
            self.failure = None
            self.state = self.State.FAILED

        if self.on_failure is not None:
            await self.on_failure(self)
        return self.state

    async def stop(self) -> "PlaybackSession.State":
        async with self._lock:
            await self._teardown()
            return self.state

    def available_providers(self) -> list[ProviderEntry]:
        if self.descriptor is None:
            return []
        return list_compatible_providers(self.descriptor.kind)

    @property
    def error_code(self) -> Optional[str]:
        if self.state != self.State.FAILED:
            return None
        return self.failure.code if self.failure else PLAYER_UNAVAILABLE

    def snapshot(self) -> dict:
        descriptor = None
        if self.descriptor is not None:
            descriptor = {
                "kind": self.descriptor.kind.value,
                "id": self.descriptor.id,
                "season": self.descriptor.season,
                "episode": self.descriptor.episode,
            }

        return {
            "state": self.state.value,
            "media": descriptor,
            "provider": self.provider_key,
            "handle": self.handle,
            "url": self.url,
            "options": self.options.as_dict() if self.options else {},
            "error": self.error_code,
            "providers": [provider.key for provider in self.available_providers()],
        }

    # ---------- transitions ----------

    def _fail(self, failure: ResolutionFailure) -> "PlaybackSession.State":
        logger.info("Playback resolution failed: %s", failure)
        self.failure = failure
        self.state = self.State.FAILED
        return self.state

    async def _mount(self, provider_key: str) -> "PlaybackSession.State":
        self.state = self.State.LOADING
        self.provider_key = str(provider_key or "").strip().lower()

        try:
            url = resolve(self.provider_key, self.descriptor, self.options)
        except ResolutionFailure as failure:
            return self._fail(failure)

        self.handle = await self.surface.mount(url, self.provider_key)
        self.url = url
        self.state = self.State.PLAYING

        await self.store.ensure_entry(self.descriptor)
        self._arm_watchdog()
        return self.state

    def _arm_watchdog(self) -> None:
        if self.watchdog_attempts <= 0:
            return

        self.watchdog = PlayerWatchdog(
            self.surface,
            self.handle,
            self.url,
            self.report_failure,
            interval=self.watchdog_interval,
            max_attempts=self.watchdog_attempts,
        )
        self.watchdog.arm()

    async def _release_player(self) -> None:
        if self.watchdog is not None:
            self.watchdog.disarm()
            self.watchdog = None

        if self.handle is not None:
            handle = self.handle
            self.handle = None
            self.url = None
            await self.surface.unmount(handle)

    async def _teardown(self) -> None:
        await self._release_player()
        self.state = self.State.IDLE
        self.descriptor = None
        self.options = None
        self.provider_key = None
        self.failure = None
