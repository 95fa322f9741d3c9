import logging
import uuid
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

PLAYER_MOUNT = "PLAYER_MOUNT"
PLAYER_UNMOUNT = "PLAYER_UNMOUNT"


class WebsocketSurface:
    """
    The client page that hosts the embedded player, reached through a
    websocket. Mounting tells the client to create the iframe; unmounting
    tells it to remove the element outright, which stops the provider's
    network and media activity.
    """

    def __init__(self, send: Callable[[dict], Awaitable[None]]):
        self._send = send
        self._mounted: set[str] = set()
        self._locations: dict[str, str] = {}

    def is_mounted(self, handle: str) -> bool:
        return handle in self._mounted

    async def mount(self, url: str, provider_key: str) -> str:
        handle = uuid.uuid4().hex
        self._mounted.add(handle)
        await self._send({
            "type": PLAYER_MOUNT,
            "handle": handle,
            "provider": provider_key,
            "url": url,
        })
        return handle

    async def unmount(self, handle: str) -> None:
        if handle not in self._mounted:
            return

        self._mounted.discard(handle)
        self._locations.pop(handle, None)
        await self._send({
            "type": PLAYER_UNMOUNT,
            "handle": handle,
        })

    def report_location(self, handle, location) -> None:
        """
        Called when the client could read the iframe location. Cross-origin
        frames usually cannot be read, so most players never report.
        """
        if handle not in self._mounted or not isinstance(location, str):
            return
        self._locations[handle] = location

    async def location(self, handle: str) -> str | None:
        return self._locations.get(handle)
