import json
import logging

from redis.exceptions import WatchError

logger = logging.getLogger(__name__)


def _decode(key: str, raw) -> list:
    if not raw:
        return []

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding corrupt value stored under %s", key)
        return []

    if not isinstance(data, list):
        logger.warning("Discarding non-list value stored under %s", key)
        return []

    return data


async def load_list(client, key: str) -> list:
    """
    Read a JSON list stored under ``key``. Missing or corrupt values read as
    an empty list.
    """
    return _decode(key, await client.get(key))


async def update_list(client, key: str, change):
    """
    Read-modify-write of the list under ``key`` in a WATCH/MULTI transaction,
    retried whenever another writer changes the key first.

    ``change`` gets the current rows and returns ``(rows, result)``; a
    ``rows`` of ``None`` leaves the stored value alone. Returns ``result``.
    """
    async with client.pipeline(transaction=True) as pipe:
        while True:
            try:
                await pipe.watch(key)
                rows, result = change(_decode(key, await pipe.get(key)))
                if rows is None:
                    return result

                pipe.multi()
                pipe.set(key, json.dumps(rows))
                await pipe.execute()
                return result
            except WatchError:
                logger.debug("Retrying write to %s after a concurrent change", key)
