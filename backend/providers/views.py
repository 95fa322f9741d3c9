from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.api_response import error, success
from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import ResolutionFailure
from providers.registry import PROVIDERS, list_compatible_providers
from providers.resolver import resolve


@api_view(["GET"])
def list_providers_view(request):
    kind = request.query_params.get("kind")

    if kind:
        if MediaKind.parse(kind) is None:
            return Response(
                error("invalid_kind", f"Unknown media kind: {kind}"),
                status=status.HTTP_400_BAD_REQUEST,
            )
        providers = list_compatible_providers(kind)
    else:
        providers = list(PROVIDERS.values())

    return Response(success([provider.as_dict() for provider in providers]))


@api_view(["GET"])
def resolve_view(request, provider_key):
    params = request.query_params

    try:
        descriptor = MediaDescriptor(
            kind=params.get("kind"),
            id=params.get("id"),
            season=params.get("season"),
            episode=params.get("episode"),
            secondary_id=params.get("secondaryId"),
        )
    except ValueError as e:
        return Response(
            error("invalid_kind", str(e)),
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        url = resolve(provider_key, descriptor, PlaybackOptions.from_mapping(params))
    except ResolutionFailure as e:
        return Response(
            error(e.code, str(e)),
            status=status.HTTP_400_BAD_REQUEST,
        )

    return Response(success({"provider": provider_key.lower(), "url": url}))
