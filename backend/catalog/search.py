# catalog/search.py

from catalog.search_types import ContentSearchResult
from catalog.tmdb_client import fetch_trending, image_url, search_multi

PLAYABLE_MEDIA_TYPES = ("movie", "tv")


def _release_year(item: dict) -> int | None:
    release_date = item.get("release_date") or item.get("first_air_date")
    if not release_date or len(release_date) < 4:
        return None
    try:
        return int(release_date[:4])
    except ValueError:
        return None


def normalize_result(item: dict, media_type: str) -> ContentSearchResult | None:
    # cards need artwork
    if not item.get("poster_path") or item.get("id") is None:
        return None

    title = item.get("title") or item.get("name")

    return ContentSearchResult(
        stream_id=str(item.get("id")),
        media_type=media_type,
        title=title or "",
        poster=image_url(item.get("poster_path")),
        release_year=_release_year(item),
    )


async def search_titles(query: str, page: int = 1) -> list[ContentSearchResult]:
    data = await search_multi(query, page)
    if not data:
        return []

    results: list[ContentSearchResult] = []

    for item in data.get("results") or []:
        media_type = item.get("media_type")
        if media_type not in PLAYABLE_MEDIA_TYPES:
            continue

        result = normalize_result(item, media_type)
        if result:
            results.append(result)

    return results


async def trending_titles(kind: str, limit: int = 10) -> list[ContentSearchResult]:
    data = await fetch_trending(kind)
    if not data:
        return []

    results = []
    for item in data.get("results") or []:
        result = normalize_result(item, kind)
        if result:
            results.append(result)
        if len(results) >= limit:
            break

    return results
