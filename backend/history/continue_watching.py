import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from catalog.tmdb_client import fetch_metadata, image_url

logger = logging.getLogger(__name__)

CONTINUE_WATCHING_LIMIT = 20


@dataclass
class ContinueWatchingCard:
    kind: str
    id: str
    season: Optional[int]
    episode: Optional[int]
    title: str
    poster: Optional[str]
    progress_seconds: float
    duration_seconds: float
    percent: float
    updated_at: float

    def as_dict(self) -> dict:
        return asdict(self)


def watched_entries(entries, limit: int = CONTINUE_WATCHING_LIMIT):
    """Entries with progress, most recently watched first."""
    watched = [entry for entry in entries if entry.progress_seconds > 0]
    watched.sort(key=lambda entry: entry.updated_at, reverse=True)
    return watched[:limit]


async def build_continue_watching(
    store,
    fetch=None,
    limit: int = CONTINUE_WATCHING_LIMIT,
) -> list[ContinueWatchingCard]:
    fetch = fetch or fetch_metadata
    entries = watched_entries(await store.entries(), limit)
    if not entries:
        return []

    metadata = await asyncio.gather(
        *(fetch(entry.kind, entry.id) for entry in entries)
    )

    cards = []
    for entry, data in zip(entries, metadata):
        if not data:
            logger.info("No metadata for %s %s, skipping card", entry.kind, entry.id)
            continue

        cards.append(
            ContinueWatchingCard(
                kind=entry.kind,
                id=entry.id,
                season=entry.season,
                episode=entry.episode,
                title=data.get("title") or data.get("name") or "Unknown",
                poster=image_url(data.get("poster_path")),
                progress_seconds=entry.progress_seconds,
                duration_seconds=entry.duration_seconds,
                percent=round(entry.percent, 2),
                updated_at=entry.updated_at,
            )
        )

    return cards
