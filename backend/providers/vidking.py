# providers/vidking.py

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import MissingIdentifier, UnsupportedKind
from providers.params import bool_param, hex_digits, seconds_param, with_query


VIDKING_BASE_URL = "https://www.vidking.net/embed"
VIDKING_KINDS = frozenset({MediaKind.MOVIE, MediaKind.TV})


def vidking_supports(kind: MediaKind) -> bool:
    return kind in VIDKING_KINDS


def build_vidking_url(
    descriptor: MediaDescriptor,
    options: PlaybackOptions,
) -> str:
    if not vidking_supports(descriptor.kind):
        raise UnsupportedKind(
            "Vidking supports only movie or tv media types",
            provider="vidking",
        )

    if not descriptor.id:
        raise MissingIdentifier("Vidking playback requires an id", provider="vidking")

    if descriptor.kind == MediaKind.MOVIE:
        base = f"{VIDKING_BASE_URL}/movie/{descriptor.id}"
        params = {}
    else:
        base = (
            f"{VIDKING_BASE_URL}/tv/"
            f"{descriptor.id}/{descriptor.season}/{descriptor.episode}"
        )
        params = {
            "nextEpisode": bool_param(options.next_episode),
            "episodeSelector": bool_param(options.episode_selector),
        }

    return with_query(
        base,
        {
            "color": hex_digits(options.color),
            "autoPlay": bool_param(options.autoplay),
            **params,
            "progress": seconds_param(options.start_at),
        },
    )
