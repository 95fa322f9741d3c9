"""
Per-viewer playback history.

One JSON list per viewer under ``viewer:{id}:history``; each row is the last
known position for one viewing identity ``(kind, id, season, episode)``.
Rows are never removed automatically.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable, Optional

from common.json_lists import load_list, update_list
from common.redis_client import get_redis_client
from common.redis_keys import history_key
from providers.base import MediaDescriptor, MediaKind, normalize_id

logger = logging.getLogger(__name__)

CompletionListener = Callable[["HistoryEntry"], Awaitable[None]]


def identity_key(kind, media_id, season=None, episode=None) -> tuple:
    """
    Canonical identity for history rows. Season and episode only take part
    for tv, where they default to 1.
    """
    parsed = MediaKind.parse(kind)
    kind_value = parsed.value if parsed else str(kind)

    if parsed == MediaKind.TV:
        return (
            kind_value,
            normalize_id(media_id),
            _episode_number(season),
            _episode_number(episode),
        )
    return (kind_value, normalize_id(media_id), None, None)


def _episode_number(value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    return number if number >= 1 else 1


def _non_negative(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


@dataclass
class HistoryEntry:
    kind: str
    id: str
    season: Optional[int]
    episode: Optional[int]
    progress_seconds: float = 0.0
    duration_seconds: float = 0.0
    updated_at: float = 0.0

    def key(self) -> tuple:
        return (self.kind, self.id, self.season, self.episode)

    @property
    def percent(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        return min(self.progress_seconds / self.duration_seconds * 100, 100.0)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> Optional["HistoryEntry"]:
        if not isinstance(data, dict):
            return None
        if MediaKind.parse(data.get("kind")) is None:
            return None

        kind, media_id, season, episode = identity_key(
            data.get("kind"), data.get("id"), data.get("season"), data.get("episode")
        )
        if not media_id:
            return None

        return cls(
            kind=kind,
            id=media_id,
            season=season,
            episode=episode,
            progress_seconds=_non_negative(data.get("progress_seconds")),
            duration_seconds=_non_negative(data.get("duration_seconds")),
            updated_at=_non_negative(data.get("updated_at")),
        )


def clamp_progress(progress, duration) -> tuple[float, float]:
    progress = _non_negative(progress)
    duration = _non_negative(duration)
    if duration > 0:
        progress = min(progress, duration)
    return progress, duration


class ProgressStore:
    def __init__(self, viewer_id: str, client=None, clock: Callable[[], float] = time.time):
        self.viewer_id = str(viewer_id)
        self.client = client if client is not None else get_redis_client()
        self.clock = clock
        self._completion_listeners: list[CompletionListener] = []

    @property
    def key(self) -> str:
        return history_key(self.viewer_id)

    async def entries(self) -> list[HistoryEntry]:
        return self._from_rows(await load_list(self.client, self.key))

    def _from_rows(self, rows: list) -> list[HistoryEntry]:
        entries = {}
        for row in rows:
            entry = HistoryEntry.from_dict(row)
            if entry is None:
                logger.debug("Skipping malformed history row for %s", self.viewer_id)
                continue
            # later rows win if a corrupt list carries duplicates
            entries[entry.key()] = entry
        return list(entries.values())

    async def get_entry(self, kind, media_id, season=None, episode=None) -> Optional[HistoryEntry]:
        wanted = identity_key(kind, media_id, season, episode)
        for entry in await self.entries():
            if entry.key() == wanted:
                return entry
        return None

    async def get_progress(self, kind, media_id, season=None, episode=None) -> float:
        entry = await self.get_entry(kind, media_id, season, episode)
        return entry.progress_seconds if entry else 0.0

    async def record_progress(
        self,
        kind,
        media_id,
        season=None,
        episode=None,
        progress_seconds=0.0,
        duration_seconds=0.0,
    ) -> HistoryEntry:
        if MediaKind.parse(kind) is None:
            raise ValueError(f"Unknown media kind: {kind}")

        key = identity_key(kind, media_id, season, episode)
        if not key[1]:
            raise ValueError("History entries require an id")

        progress, duration = clamp_progress(progress_seconds, duration_seconds)

        def change(rows):
            entries = self._from_rows(rows)
            entry = next((e for e in entries if e.key() == key), None)
            if entry is None:
                entry = HistoryEntry(*key)
                entries.append(entry)

            entry.progress_seconds = progress
            entry.duration_seconds = duration
            entry.updated_at = self.clock()
            return [e.to_dict() for e in entries], entry

        return await update_list(self.client, self.key, change)

    async def ensure_entry(self, descriptor: MediaDescriptor) -> HistoryEntry:
        """
        Zero-progress row for a first-time identity; existing rows are left
        untouched.
        """
        kind, media_id, season, episode = descriptor.identity()
        key = identity_key(kind, media_id, season, episode)

        def change(rows):
            entries = self._from_rows(rows)
            for entry in entries:
                if entry.key() == key:
                    return None, (entry, False)

            entry = HistoryEntry(*key, updated_at=self.clock())
            entries.append(entry)
            return [e.to_dict() for e in entries], (entry, True)

        entry, created = await update_list(self.client, self.key, change)
        if created:
            logger.info("Started history for %s %s (viewer %s)", kind, media_id, self.viewer_id)
        return entry

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._completion_listeners.append(listener)

    def remove_completion_listener(self, listener: CompletionListener) -> None:
        if listener in self._completion_listeners:
            self._completion_listeners.remove(listener)

    async def on_completed(self, kind, media_id, season=None, episode=None) -> None:
        entry = await self.get_entry(kind, media_id, season, episode)
        if entry is None:
            return

        for listener in list(self._completion_listeners):
            try:
                await listener(entry)
            except Exception:
                logger.exception("Completion listener failed for viewer %s", self.viewer_id)
