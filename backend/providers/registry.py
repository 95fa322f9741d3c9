from dataclasses import dataclass
from typing import Callable, FrozenSet

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import UnknownProvider
from providers.fluxline import FLUXLINE_KINDS, build_fluxline_url
from providers.pulseview import PULSEVIEW_KINDS, build_pulseview_url
from providers.vidking import VIDKING_KINDS, build_vidking_url


@dataclass(frozen=True)
class ProviderEntry:
    key: str
    name: str
    kinds: FrozenSet[MediaKind]
    build_url: Callable[[MediaDescriptor, PlaybackOptions], str]

    def supports(self, kind) -> bool:
        return MediaKind.parse(kind) in self.kinds

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "kinds": sorted(kind.value for kind in self.kinds),
        }


# Declaration order is the priority order.
PROVIDERS = {
    "vidking": ProviderEntry(
        key="vidking",
        name="Vidking",
        kinds=VIDKING_KINDS,
        build_url=build_vidking_url,
    ),
    "fluxline": ProviderEntry(
        key="fluxline",
        name="FluxLine",
        kinds=FLUXLINE_KINDS,
        build_url=build_fluxline_url,
    ),
    "pulseview": ProviderEntry(
        key="pulseview",
        name="PulseView",
        kinds=PULSEVIEW_KINDS,
        build_url=build_pulseview_url,
    ),
}


def get_provider(key: str) -> ProviderEntry:
    provider = PROVIDERS.get(str(key or "").strip().lower())
    if not provider:
        raise UnknownProvider(f"Unknown provider: {key}", provider=key)
    return provider


def list_compatible_providers(kind) -> list[ProviderEntry]:
    return [provider for provider in PROVIDERS.values() if provider.supports(kind)]
