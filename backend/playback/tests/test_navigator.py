import asyncio
from unittest.mock import AsyncMock

from django.test import TestCase

from playback.navigator import EpisodeNavigator, format_timestamp
from playback.session import PlaybackSession
from providers.base import MediaDescriptor, MediaKind, PlaybackOptions

from .utils import make_store, make_surface

SHOW = {
    "id": 42,
    "name": "A Show",
    "seasons": [
        {"season_number": 0, "name": "Specials", "episode_count": 3},
        {"season_number": 1, "name": "Season 1", "episode_count": 2},
        {"season_number": 2, "name": "Season 2", "episode_count": 3},
        {"season_number": None},
    ],
}


def season_payload(show_id, number):
    return {
        "season_number": number,
        "episodes": [
            {"episode_number": n, "name": f"S{number}E{n}", "still_path": f"/{n}.jpg"}
            for n in (1, 2, 3)
        ] + [{"episode_number": 0}],
    }


class FormatTimestampTests(TestCase):
    def test_minutes(self):
        self.assertEqual(format_timestamp(0), "0:00")
        self.assertEqual(format_timestamp(65.9), "1:05")
        self.assertEqual(format_timestamp(3599), "59:59")

    def test_hours(self):
        self.assertEqual(format_timestamp(3600), "1:00:00")
        self.assertEqual(format_timestamp(3723), "1:02:03")


class EpisodeNavigatorTests(TestCase):
    def setUp(self):
        self.store = make_store()
        self.surface, self.sent = make_surface()
        self.session = PlaybackSession(self.surface, self.store, watchdog_attempts=0)
        self.fetch_show = AsyncMock(return_value=SHOW)
        self.fetch_episodes = AsyncMock(side_effect=season_payload)
        self.navigator = EpisodeNavigator(
            self.session,
            self.store,
            fetch_show=self.fetch_show,
            fetch_episodes=self.fetch_episodes,
        )

    async def test_load_seasons_filters_specials(self):
        seasons = await self.navigator.load_seasons(42)

        self.assertEqual([s.number for s in seasons], [1, 2])
        self.fetch_show.assert_awaited_once_with(MediaKind.TV, "42")

    async def test_failed_show_fetch_gives_no_seasons(self):
        self.fetch_show.return_value = None
        self.assertEqual(await self.navigator.load_seasons(42), [])

    async def test_select_season_fetches_every_time(self):
        await self.navigator.load_seasons(42)

        await self.navigator.select_season(1)
        await self.navigator.select_season(2)
        await self.navigator.select_season(1)

        self.assertEqual(self.fetch_episodes.await_count, 3)

    async def test_episode_badges(self):
        await self.store.record_progress("tv", "42", 2, 1, 65, 1800)
        await self.store.record_progress("tv", "42", 2, 2, 3723, 5400)
        await self.store.record_progress("tv", "42", 1, 3, 500, 1800)

        await self.navigator.load_seasons(42)
        episodes = await self.navigator.select_season(2)

        self.assertEqual([e.number for e in episodes], [1, 2, 3])
        self.assertEqual([e.resume_badge for e in episodes], ["1:05", "1:02:03", None])
        self.assertEqual(episodes[0].still, "https://image.tmdb.org/t/p/w500/1.jpg")

    async def test_select_season_requires_show(self):
        with self.assertRaises(ValueError):
            await self.navigator.select_season(1)

    async def test_superseded_selection_dropped(self):
        release = asyncio.Event()

        async def slow_then_fast(show_id, number):
            if number == 1:
                await release.wait()
            return season_payload(show_id, number)

        self.fetch_episodes.side_effect = slow_then_fast
        await self.navigator.load_seasons(42)

        slow = asyncio.create_task(self.navigator.select_season(1))
        await asyncio.sleep(0)
        fast = await self.navigator.select_season(2)
        release.set()

        self.assertIsNone(await slow)
        self.assertEqual(fast[0].season, 2)
        self.assertEqual(self.navigator.selected_season, 2)
        self.assertEqual(self.navigator.episodes[0].season, 2)

    async def test_result_for_show_no_longer_playing_dropped(self):
        release = asyncio.Event()

        async def slow(show_id, number):
            await release.wait()
            return season_payload(show_id, number)

        self.fetch_episodes.side_effect = slow
        await self.session.start(MediaDescriptor(MediaKind.TV, 42))
        await self.navigator.load_seasons(42)

        pending = asyncio.create_task(self.navigator.select_season(1))
        await asyncio.sleep(0)
        await self.session.start(MediaDescriptor(MediaKind.TV, 7))
        release.set()

        self.assertIsNone(await pending)
        self.assertEqual(self.navigator.episodes, [])

    async def test_browsing_while_a_movie_plays(self):
        await self.session.start(MediaDescriptor(MediaKind.MOVIE, 7))

        seasons = await self.navigator.load_seasons(42)
        episodes = await self.navigator.select_season(1)

        self.assertEqual([s.number for s in seasons], [1, 2])
        self.assertEqual([e.number for e in episodes], [1, 2, 3])

    async def test_browsing_another_show_while_one_plays(self):
        await self.session.start(MediaDescriptor(MediaKind.TV, 7, 1, 1))

        seasons = await self.navigator.load_seasons(42)

        self.assertEqual([s.number for s in seasons], [1, 2])
        self.assertEqual(self.navigator.seasons, seasons)

    async def test_season_list_dropped_when_playback_starts_meanwhile(self):
        release = asyncio.Event()

        async def slow(kind, show_id):
            await release.wait()
            return SHOW

        self.fetch_show.side_effect = slow

        pending = asyncio.create_task(self.navigator.load_seasons(42))
        await asyncio.sleep(0)
        await self.session.start(MediaDescriptor(MediaKind.MOVIE, 7))
        release.set()

        self.assertIsNone(await pending)
        self.assertEqual(self.navigator.seasons, [])

    async def test_play_episode_injects_resume_offset(self):
        await self.store.record_progress("tv", "42", 2, 3, 754.6, 2400)
        await self.session.start(
            MediaDescriptor(MediaKind.TV, 42, 1, 1),
            PlaybackOptions(autoplay=True),
            "fluxline",
        )
        await self.navigator.load_seasons(42)

        state = await self.navigator.play_episode(2, 3)

        self.assertEqual(state, PlaybackSession.State.PLAYING)
        self.assertEqual(self.session.descriptor.identity(), ("tv", "42", 2, 3))
        self.assertEqual(self.session.options.start_at, 754.6)
        self.assertEqual(self.session.provider_key, "fluxline")
        self.assertEqual(
            self.session.url,
            "https://player.fluxline.tv/embed/tv/42/2/3?autoplay=true&t=754",
        )

    async def test_play_unwatched_episode_clears_offset(self):
        await self.session.start(
            MediaDescriptor(MediaKind.TV, 42, 1, 1),
            PlaybackOptions(start_at=100),
        )
        await self.navigator.load_seasons(42)

        await self.navigator.play_episode(1, 2)

        self.assertIsNone(self.session.options.start_at)
        self.assertEqual(self.session.url, "https://www.vidking.net/embed/tv/42/1/2")
