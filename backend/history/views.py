from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.api_response import error, success

from .continue_watching import build_continue_watching
from .serializers import (
    ProgressQuerySerializer,
    ProgressUpdateSerializer,
    WatchlistToggleSerializer,
)
from .store import ProgressStore
from .watchlist import Watchlist


def _invalid(serializer):
    return Response(
        error("invalid_request", serializer.errors),
        status=status.HTTP_400_BAD_REQUEST,
    )


def _progress_payload(entry, query):
    if entry is None:
        return {
            "kind": query["kind"],
            "id": query["id"],
            "season": query.get("season"),
            "episode": query.get("episode"),
            "progress_seconds": 0,
            "duration_seconds": 0,
            "percent": 0,
            "updated_at": None,
        }

    return {**entry.to_dict(), "percent": round(entry.percent, 2)}


@api_view(["GET", "POST"])
def progress_view(request, viewer_id):
    store = ProgressStore(viewer_id)

    if request.method == "POST":
        serializer = ProgressUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)

        data = serializer.validated_data
        entry = async_to_sync(store.record_progress)(
            data["kind"],
            data["id"],
            data.get("season"),
            data.get("episode"),
            data["progress_seconds"],
            data.get("duration_seconds", 0),
        )
        return Response(success(_progress_payload(entry, data)))

    serializer = ProgressQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return _invalid(serializer)

    query = serializer.validated_data
    entry = async_to_sync(store.get_entry)(
        query["kind"],
        query["id"],
        query.get("season"),
        query.get("episode"),
    )
    return Response(success(_progress_payload(entry, query)))


@api_view(["GET"])
def continue_watching_view(request, viewer_id):
    store = ProgressStore(viewer_id)
    cards = async_to_sync(build_continue_watching)(store)
    return Response(success([card.as_dict() for card in cards]))


@api_view(["GET", "POST"])
def watchlist_view(request, viewer_id):
    watchlist = Watchlist(viewer_id)

    if request.method == "POST":
        serializer = WatchlistToggleSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)

        data = serializer.validated_data
        in_watchlist = async_to_sync(watchlist.toggle)(
            data["kind"],
            data["id"],
            data.get("title", ""),
            data.get("poster_path"),
        )
        return Response(success({
            "kind": data["kind"],
            "id": data["id"],
            "in_watchlist": in_watchlist,
        }))

    entries = async_to_sync(watchlist.entries)()
    return Response(success([entry.to_dict() for entry in entries]))
