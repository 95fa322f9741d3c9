import asyncio

import fakeredis
import fakeredis.aioredis
from django.test import TestCase

from common.redis_keys import watchlist_key
from history.watchlist import Watchlist


class WatchlistTests(TestCase):
    def setUp(self):
        self.client = fakeredis.aioredis.FakeRedis(
            server=fakeredis.FakeServer(),
            decode_responses=True,
        )
        self.watchlist = Watchlist("viewer-1", client=self.client, clock=lambda: 50.0)

    async def test_toggle_adds_then_removes(self):
        self.assertTrue(await self.watchlist.toggle("movie", 550, "Fight Club", "/p.jpg"))
        self.assertTrue(await self.watchlist.contains("movie", "550"))

        self.assertFalse(await self.watchlist.toggle("movie", "550"))
        self.assertFalse(await self.watchlist.contains("movie", 550))

    async def test_membership_keyed_by_kind_and_id(self):
        await self.watchlist.toggle("movie", "42", "A movie")
        await self.watchlist.toggle("tv", "42", "A show")

        entries = await self.watchlist.entries()
        self.assertEqual([(e.kind, e.id) for e in entries], [("movie", "42"), ("tv", "42")])
        self.assertEqual(entries[1].title, "A show")
        self.assertEqual(entries[1].added_at, 50.0)

    async def test_remove(self):
        await self.watchlist.toggle("tv", "1")
        self.assertTrue(await self.watchlist.remove("tv", "1"))
        self.assertFalse(await self.watchlist.remove("tv", "1"))

    async def test_corrupt_storage_reads_as_empty(self):
        await self.client.set(watchlist_key("viewer-1"), "][")
        self.assertEqual(await self.watchlist.entries(), [])
        self.assertTrue(await self.watchlist.toggle("movie", "1"))

    async def test_concurrent_toggles_keep_every_title(self):
        await asyncio.gather(
            self.watchlist.toggle("movie", "1"),
            self.watchlist.toggle("movie", "2"),
            self.watchlist.toggle("tv", "3"),
        )

        entries = await self.watchlist.entries()
        self.assertCountEqual(
            [(e.kind, e.id) for e in entries],
            [("movie", "1"), ("movie", "2"), ("tv", "3")],
        )
