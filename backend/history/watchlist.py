import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional

from common.json_lists import load_list, update_list
from common.redis_client import get_redis_client
from common.redis_keys import watchlist_key
from providers.base import MediaKind, normalize_id

logger = logging.getLogger(__name__)


@dataclass
class WatchlistEntry:
    kind: str
    id: str
    title: str = ""
    poster_path: Optional[str] = None
    added_at: float = 0.0

    def key(self) -> tuple:
        return (self.kind, self.id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> Optional["WatchlistEntry"]:
        if not isinstance(data, dict):
            return None
        kind = MediaKind.parse(data.get("kind"))
        media_id = normalize_id(data.get("id"))
        if kind is None or not media_id:
            return None

        try:
            added_at = float(data.get("added_at") or 0)
        except (TypeError, ValueError, OverflowError):
            added_at = 0.0

        return cls(
            kind=kind.value,
            id=media_id,
            title=str(data.get("title") or ""),
            poster_path=data.get("poster_path") or None,
            added_at=added_at,
        )


class Watchlist:
    """Set of titles keyed by (kind, id), kept in insertion order."""

    def __init__(self, viewer_id: str, client=None, clock=time.time):
        self.viewer_id = str(viewer_id)
        self.client = client if client is not None else get_redis_client()
        self.clock = clock

    @property
    def key(self) -> str:
        return watchlist_key(self.viewer_id)

    async def entries(self) -> list[WatchlistEntry]:
        return self._from_rows(await load_list(self.client, self.key))

    @staticmethod
    def _from_rows(rows: list) -> list[WatchlistEntry]:
        entries = []
        seen = set()
        for row in rows:
            entry = WatchlistEntry.from_dict(row)
            if entry is None or entry.key() in seen:
                continue
            seen.add(entry.key())
            entries.append(entry)
        return entries

    async def contains(self, kind, media_id) -> bool:
        wanted = (MediaKind(kind).value, normalize_id(media_id))
        return any(entry.key() == wanted for entry in await self.entries())

    async def remove(self, kind, media_id) -> bool:
        wanted = (MediaKind(kind).value, normalize_id(media_id))

        def change(rows):
            entries = self._from_rows(rows)
            remaining = [entry for entry in entries if entry.key() != wanted]
            if len(remaining) == len(entries):
                return None, False
            return [entry.to_dict() for entry in remaining], True

        return await update_list(self.client, self.key, change)

    async def toggle(self, kind, media_id, title: str = "", poster_path=None) -> bool:
        """
        Add the title, or remove it when already present. Returns membership
        after the call.
        """
        kind = MediaKind(kind).value
        media_id = normalize_id(media_id)
        if not media_id:
            raise ValueError("Watchlist entries require an id")

        def change(rows):
            entries = self._from_rows(rows)
            remaining = [entry for entry in entries if entry.key() != (kind, media_id)]
            if len(remaining) == len(entries):
                remaining.append(
                    WatchlistEntry(
                        kind=kind,
                        id=media_id,
                        title=title or "",
                        poster_path=poster_path or None,
                        added_at=self.clock(),
                    )
                )
            return [entry.to_dict() for entry in remaining], len(remaining) > len(entries)

        added = await update_list(self.client, self.key, change)
        if added:
            logger.info("Added %s %s to watchlist of %s", kind, media_id, self.viewer_id)
        else:
            logger.info("Removed %s %s from watchlist of %s", kind, media_id, self.viewer_id)
        return added
