# providers/resolver.py

import logging

from providers.base import MediaDescriptor, PlaybackOptions
from providers.exceptions import (
    MissingIdentifier,
    NoCompatibleProvider,
    UnsupportedKind,
)
from providers.registry import ProviderEntry, get_provider, list_compatible_providers

logger = logging.getLogger(__name__)


def resolve(
    provider_key: str,
    descriptor: MediaDescriptor,
    options: PlaybackOptions | None = None,
) -> str:
    """
    Build the embed URL for ``descriptor`` on one provider.

    Raises a ``ResolutionFailure`` subclass instead of returning an empty or
    partial URL.
    """
    provider = get_provider(provider_key)

    if not provider.supports(descriptor.kind):
        raise UnsupportedKind(
            f"{provider.name} does not support {descriptor.kind.value}",
            provider=provider.key,
        )

    url = provider.build_url(descriptor, options or PlaybackOptions())
    if not url:
        raise MissingIdentifier(
            f"{provider.name} produced no URL for {descriptor.id!r}",
            provider=provider.key,
        )

    logger.debug("Resolved %s %s via %s", descriptor.kind.value, descriptor.id, provider.key)
    return url


def select_provider(
    descriptor: MediaDescriptor,
    preferred_key: str | None = None,
) -> ProviderEntry:
    """
    The preferred provider when it can play ``descriptor``, otherwise the
    highest-priority compatible one.
    """
    compatible = list_compatible_providers(descriptor.kind)
    if not compatible:
        raise NoCompatibleProvider(
            f"No provider can play {descriptor.kind.value} content"
        )

    if preferred_key:
        wanted = preferred_key.strip().lower()
        for provider in compatible:
            if provider.key == wanted:
                return provider

    return compatible[0]
