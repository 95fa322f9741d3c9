import asyncio

import fakeredis
import fakeredis.aioredis

from history.store import ProgressStore
from playback.surface import WebsocketSurface


class SentMessages(list):
    async def __call__(self, payload):
        self.append(payload)

    def of_type(self, message_type):
        return [m for m in self if m["type"] == message_type]


def make_store(viewer_id="viewer-1"):
    client = fakeredis.aioredis.FakeRedis(
        server=fakeredis.FakeServer(),
        decode_responses=True,
    )
    return ProgressStore(viewer_id, client=client)


def make_surface():
    sent = SentMessages()
    return WebsocketSurface(sent), sent


async def wait_for_event(comm, expected_type, timeout=1.0):
    """
    Consume messages until expected_type is found or timeout expires.
    """
    try:
        while True:
            event = await comm.receive_json_from(timeout=timeout)
            if event.get("type") == expected_type:
                return event
    except asyncio.TimeoutError as exc:
        raise AssertionError(f"Did not receive event {expected_type}") from exc
