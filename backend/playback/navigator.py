"""
Season and episode navigation for tv content.

Season lists and episode lists come from the metadata collaborator; those
awaits are where a user can move on to something else. A result is applied
only if it still belongs to the show being navigated, no newer selection was
made meanwhile, and the title playing when the request went out is still the
one playing.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Optional

from catalog.tmdb_client import fetch_metadata, fetch_season, image_url
from providers.base import MediaDescriptor, MediaKind, PlaybackOptions, normalize_id

logger = logging.getLogger(__name__)


def format_timestamp(seconds) -> str:
    """M:SS, or H:MM:SS from one hour up."""
    total = max(int(math.floor(seconds)), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _positive_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number >= 1 else None


@dataclass
class Season:
    number: int
    name: str
    episode_count: int

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class EpisodeRow:
    season: int
    number: int
    name: str
    overview: str
    still: Optional[str]
    progress_seconds: float
    resume_badge: Optional[str]

    def as_dict(self) -> dict:
        return asdict(self)


class EpisodeNavigator:
    def __init__(self, session, store, fetch_show=None, fetch_episodes=None):
        self.session = session
        self.store = store
        self._fetch_show = fetch_show
        self._fetch_episodes = fetch_episodes

        self.show_id: Optional[str] = None
        self.seasons: list[Season] = []
        self.selected_season: Optional[int] = None
        self.episodes: list[EpisodeRow] = []
        self._generation = 0

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _playing_title(self) -> Optional[tuple]:
        playing = self.session.descriptor
        if playing is None:
            return None
        return (playing.kind, playing.id)

    def _is_current(self, show_id: str, generation: int, playing_title) -> bool:
        if generation != self._generation or show_id != self.show_id:
            return False
        return self._playing_title() == playing_title

    async def load_seasons(self, show_id) -> Optional[list[Season]]:
        show_id = normalize_id(show_id)
        if not show_id:
            raise ValueError("A show id is required")

        generation = self._next_generation()
        self.show_id = show_id
        self.seasons = []
        self.selected_season = None
        self.episodes = []

        playing_title = self._playing_title()
        data = await (self._fetch_show or fetch_metadata)(MediaKind.TV, show_id)
        if not self._is_current(show_id, generation, playing_title):
            logger.debug("Dropping stale season list for show %s", show_id)
            return None

        seasons = []
        for item in (data or {}).get("seasons") or []:
            if not isinstance(item, dict):
                continue
            number = _positive_int(item.get("season_number"))
            if number is None:
                continue
            seasons.append(
                Season(
                    number=number,
                    name=item.get("name") or f"Season {number}",
                    episode_count=_positive_int(item.get("episode_count")) or 0,
                )
            )

        self.seasons = seasons
        return seasons

    async def select_season(self, season_number) -> Optional[list[EpisodeRow]]:
        if self.show_id is None:
            raise ValueError("Load a show before selecting a season")

        number = _positive_int(season_number)
        if number is None:
            raise ValueError(f"Invalid season number: {season_number}")

        show_id = self.show_id
        generation = self._next_generation()
        self.selected_season = number

        playing_title = self._playing_title()
        data = await (self._fetch_episodes or fetch_season)(show_id, number)
        if not self._is_current(show_id, generation, playing_title):
            logger.debug("Dropping stale episode list for show %s season %s", show_id, number)
            return None

        entries = await self.store.entries()
        if not self._is_current(show_id, generation, playing_title):
            return None

        progress = {entry.key(): entry.progress_seconds for entry in entries}

        rows = []
        for item in (data or {}).get("episodes") or []:
            if not isinstance(item, dict):
                continue
            episode_number = _positive_int(item.get("episode_number"))
            if episode_number is None:
                continue

            seconds = progress.get((MediaKind.TV.value, show_id, number, episode_number), 0.0)
            rows.append(
                EpisodeRow(
                    season=number,
                    number=episode_number,
                    name=item.get("name") or f"Episode {episode_number}",
                    overview=item.get("overview") or "",
                    still=image_url(item.get("still_path")),
                    progress_seconds=seconds,
                    resume_badge=format_timestamp(seconds) if seconds > 0 else None,
                )
            )

        self.episodes = rows
        return rows

    async def play_episode(
        self,
        season,
        episode,
        options: Optional[PlaybackOptions] = None,
        provider_key: Optional[str] = None,
    ):
        if self.show_id is None:
            raise ValueError("Load a show before selecting an episode")

        current = self.session.descriptor
        if current is not None and current.kind == MediaKind.TV and current.id == self.show_id:
            descriptor = current.with_episode(season, episode)
        else:
            descriptor = MediaDescriptor(MediaKind.TV, self.show_id, season, episode)

        resume_at = await self.store.get_progress(
            MediaKind.TV, self.show_id, descriptor.season, descriptor.episode
        )
        base_options = options or self.session.options or PlaybackOptions()
        options = base_options.replace(start_at=resume_at if resume_at > 0 else None)

        return await self.session.start(
            descriptor,
            options,
            provider_key or self.session.provider_key,
        )
