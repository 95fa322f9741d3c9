# providers/fluxline.py

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import MissingIdentifier, UnsupportedKind
from providers.params import bool_param, hex_digits, seconds_param, with_query


FLUXLINE_BASE_URL = "https://player.fluxline.tv/embed"
FLUXLINE_KINDS = frozenset({MediaKind.MOVIE, MediaKind.TV, MediaKind.ANIME})


def fluxline_supports(kind: MediaKind) -> bool:
    return kind in FLUXLINE_KINDS


def _fluxline_path(descriptor: MediaDescriptor) -> str:
    if descriptor.kind == MediaKind.ANIME:
        anime_id = descriptor.secondary_id or descriptor.id
        if not anime_id:
            raise MissingIdentifier(
                "FluxLine anime playback requires an id", provider="fluxline"
            )
        return f"/anime/{anime_id}/{descriptor.episode}"

    if not descriptor.id:
        raise MissingIdentifier("FluxLine playback requires an id", provider="fluxline")

    if descriptor.kind == MediaKind.TV:
        return f"/tv/{descriptor.id}/{descriptor.season}/{descriptor.episode}"
    return f"/movie/{descriptor.id}"


def build_fluxline_url(
    descriptor: MediaDescriptor,
    options: PlaybackOptions,
) -> str:
    if not fluxline_supports(descriptor.kind):
        raise UnsupportedKind(
            f"FluxLine does not support {descriptor.kind.value}",
            provider="fluxline",
        )

    autonext = None
    if descriptor.kind != MediaKind.MOVIE:
        autonext = bool_param(options.next_episode)

    return with_query(
        f"{FLUXLINE_BASE_URL}{_fluxline_path(descriptor)}",
        {
            "theme": hex_digits(options.color),
            "autoplay": bool_param(options.autoplay),
            "mute": bool_param(options.muted),
            "autonext": autonext,
            "t": seconds_param(options.start_at),
            "server": options.server or None,
        },
    )
