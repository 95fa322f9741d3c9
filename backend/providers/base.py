# providers/base.py

import math
from dataclasses import dataclass, fields, replace as dataclass_replace
from enum import Enum
from typing import Any, Mapping, Optional


class MediaKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"
    ANIME = "anime"

    @classmethod
    def parse(cls, value) -> Optional["MediaKind"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def normalize_id(value) -> str:
    """
    Identifiers travel as strings; numeric ids (int or "42.0" floats coming
    from JS) collapse to their integer form so "42" and 42 match.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return ""
        return str(int(value))
    return str(value).strip()


def _positive_or_default(value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    return number if number >= 1 else 1


@dataclass(frozen=True, eq=False)
class MediaDescriptor:
    kind: MediaKind
    id: str
    season: Optional[int] = None
    episode: Optional[int] = None
    secondary_id: Optional[str] = None  # anime only

    def __post_init__(self):
        kind = MediaKind.parse(self.kind)
        if kind is None:
            raise ValueError(f"Unknown media kind: {self.kind}")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "id", normalize_id(self.id))

        if kind == MediaKind.TV:
            object.__setattr__(self, "season", _positive_or_default(self.season))
            object.__setattr__(self, "episode", _positive_or_default(self.episode))
        elif kind == MediaKind.ANIME:
            object.__setattr__(self, "season", None)
            object.__setattr__(self, "episode", _positive_or_default(self.episode))
        else:
            object.__setattr__(self, "season", None)
            object.__setattr__(self, "episode", None)

        if kind != MediaKind.ANIME or not self.secondary_id:
            object.__setattr__(self, "secondary_id", None)
        else:
            object.__setattr__(self, "secondary_id", normalize_id(self.secondary_id))

    def identity(self) -> tuple:
        """(kind, id, season, episode); season/episode only count for tv."""
        if self.kind == MediaKind.TV:
            return (self.kind.value, self.id, self.season, self.episode)
        return (self.kind.value, self.id, None, None)

    def with_episode(self, season: int, episode: int) -> "MediaDescriptor":
        return dataclass_replace(self, season=season, episode=episode)

    def __eq__(self, other):
        if not isinstance(other, MediaDescriptor):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self):
        return hash(self.identity())


# request keys accepted for each option, camelCase first
_OPTION_ALIASES = {
    "color": ("color",),
    "autoplay": ("autoplay", "autoPlay"),
    "muted": ("muted",),
    "next_episode": ("nextEpisode", "next_episode"),
    "episode_selector": ("episodeSelector", "episode_selector"),
    "start_at": ("startAt", "start_at", "progress"),
    "server": ("server",),
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _coerce_bool(value) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def _coerce_seconds(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


@dataclass(frozen=True)
class PlaybackOptions:
    """
    Provider-agnostic playback settings. ``None`` means unset; unset options
    are never written into an embed URL.
    """

    color: Optional[str] = None
    autoplay: Optional[bool] = None
    muted: Optional[bool] = None
    next_episode: Optional[bool] = None
    episode_selector: Optional[bool] = None
    start_at: Optional[float] = None
    server: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "PlaybackOptions":
        if not data or not isinstance(data, Mapping):
            return cls()

        values = {}
        for field_name, aliases in _OPTION_ALIASES.items():
            raw = next((data[a] for a in aliases if a in data), None)
            if raw is None or raw == "":
                continue

            if field_name in {"color", "server"}:
                value = str(raw).strip() or None
            elif field_name == "start_at":
                value = _coerce_seconds(raw)
            else:
                value = _coerce_bool(raw)

            if value is not None:
                values[field_name] = value

        return cls(**values)

    def replace(self, **changes) -> "PlaybackOptions":
        return dataclass_replace(self, **changes)

    def as_dict(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
