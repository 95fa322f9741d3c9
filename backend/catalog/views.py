from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.api_response import error, success

from .search import search_titles, trending_titles


@api_view(["GET"])
def search_view(request):
    query = request.query_params.get("query", "").strip()
    if not query:
        return Response(
            error("missing_query", "Please enter a search term"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        page = max(int(request.query_params.get("page", 1)), 1)
    except ValueError:
        page = 1

    results = async_to_sync(search_titles)(query, page)
    return Response(success([result.as_dict() for result in results]))


@api_view(["GET"])
def trending_view(request, kind):
    if kind not in ("movie", "tv"):
        return Response(
            error("invalid_kind", f"Unknown media kind: {kind}"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    results = async_to_sync(trending_titles)(kind)
    return Response(success([result.as_dict() for result in results]))
