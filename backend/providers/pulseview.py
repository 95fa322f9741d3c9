# providers/pulseview.py
#
# PulseView only carries movies and anime; it has no episodic tv catalogue.

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import MissingIdentifier, UnsupportedKind
from providers.params import bool_param, hex_digits, seconds_param, with_query


PULSEVIEW_BASE_URL = "https://pulseview.stream/e"
PULSEVIEW_KINDS = frozenset({MediaKind.MOVIE, MediaKind.ANIME})


def pulseview_supports(kind: MediaKind) -> bool:
    return kind in PULSEVIEW_KINDS


def build_pulseview_url(
    descriptor: MediaDescriptor,
    options: PlaybackOptions,
) -> str:
    if not pulseview_supports(descriptor.kind):
        raise UnsupportedKind(
            f"PulseView does not support {descriptor.kind.value}",
            provider="pulseview",
        )

    if descriptor.kind == MediaKind.ANIME:
        content_id = descriptor.secondary_id or descriptor.id
    else:
        content_id = descriptor.id

    if not content_id:
        raise MissingIdentifier("PulseView playback requires an id", provider="pulseview")

    if descriptor.kind == MediaKind.ANIME:
        base = f"{PULSEVIEW_BASE_URL}/anime/{content_id}/{descriptor.episode}"
    else:
        base = f"{PULSEVIEW_BASE_URL}/movie/{content_id}"

    return with_query(
        base,
        {
            "accent": hex_digits(options.color, upper=True),
            "auto_play": bool_param(options.autoplay),
            "start": seconds_param(options.start_at),
            "source": options.server or None,
        },
    )
