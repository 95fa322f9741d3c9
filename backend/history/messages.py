"""
Inbound player events.

Embedded players post ``{"type": "PLAYER_EVENT", "data": {...}}`` envelopes
into the page; the client forwards them untouched. Anything able to post into
the page can forge these, so every field is checked and anything off is
dropped without an error.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Optional

from providers.base import MediaKind, normalize_id

logger = logging.getLogger(__name__)

PLAYER_EVENT = "PLAYER_EVENT"
ENDED_EVENT = "ended"


@dataclass(frozen=True)
class ProgressUpdate:
    kind: MediaKind
    id: str
    current_time: float
    duration: float
    season: Optional[int] = None
    episode: Optional[int] = None
    ended: bool = False


def _number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _optional_positive_int(value):
    """Returns (ok, number). Absent is fine; present must be an int >= 1."""
    if value is None:
        return True, None
    if isinstance(value, bool):
        return False, None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            value = int(value.strip())
        except ValueError:
            return False, None
    if not isinstance(value, int) or value < 1:
        return False, None
    return True, value


def _identifier(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""
    return normalize_id(value)


def parse_player_message(raw) -> Optional[ProgressUpdate]:
    """
    Validate one inbound message. Returns ``None`` for anything that is not a
    well-formed player progress event; never raises.
    """
    msg = raw
    if isinstance(msg, (bytes, bytearray)):
        try:
            msg = msg.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(msg, str):
        try:
            msg = json.loads(msg)
        except ValueError:
            return None

    try:
        return _parse_envelope(msg)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Dropping unparseable player event")
        return None


def _parse_envelope(msg) -> Optional[ProgressUpdate]:
    if not isinstance(msg, dict) or msg.get("type") != PLAYER_EVENT:
        return None

    data = msg.get("data")
    if not isinstance(data, dict):
        return None

    current_time = _number(data.get("currentTime"))
    duration = _number(data.get("duration"))
    media_id = _identifier(data.get("id"))
    kind = MediaKind.parse(data.get("mediaType")) if isinstance(data.get("mediaType"), str) else None

    if current_time is None or duration is None or not media_id or kind is None:
        logger.debug("Dropping malformed player event")
        return None

    season_ok, season = _optional_positive_int(data.get("season"))
    episode_ok, episode = _optional_positive_int(data.get("episode"))
    if not (season_ok and episode_ok):
        logger.debug("Dropping player event with bad season/episode")
        return None

    return ProgressUpdate(
        kind=kind,
        id=media_id,
        current_time=current_time,
        duration=duration,
        season=season,
        episode=episode,
        ended=data.get("event") == ENDED_EVENT,
    )


async def apply_player_message(store, raw) -> bool:
    """
    Record a forwarded player event. Returns True when the message was
    accepted and written.
    """
    update = parse_player_message(raw)
    if update is None:
        return False

    await store.record_progress(
        update.kind,
        update.id,
        update.season,
        update.episode,
        update.current_time,
        update.duration,
    )

    if update.ended:
        await store.on_completed(update.kind, update.id, update.season, update.episode)

    return True
