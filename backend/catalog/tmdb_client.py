"""
Metadata collaborator.

Talks to a TMDB-shaped backend (TMDB itself, or a proxy exposing the same
paths). Every call returns the decoded JSON object, or ``None`` when the
request failed in any way; callers treat ``None`` as "no data".
"""

import logging

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"


def get_base_url() -> str:
    return getattr(settings, "METADATA_BASE_URL", "https://api.themoviedb.org/3").rstrip("/")


def metadata_kind(kind) -> str:
    """Anime titles live under the tv catalogue."""
    value = getattr(kind, "value", kind)
    return "tv" if value == "anime" else str(value)


def image_url(path: str | None) -> str | None:
    return f"{IMAGE_BASE_URL}{path}" if path else None


async def fetch_json(path: str, params: dict | None = None) -> dict | None:
    query = dict(params or {})
    api_key = getattr(settings, "TMDB_API_KEY", None)
    if api_key:
        query["api_key"] = api_key

    url = f"{get_base_url()}/{path.lstrip('/')}"
    timeout = getattr(settings, "METADATA_TIMEOUT", 10.0)

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, params=query)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as error:
        logger.warning(
            "Metadata request %s failed with status %s",
            path,
            error.response.status_code,
        )
        return None
    except httpx.HTTPError as error:
        logger.warning("Metadata request %s failed: %s", path, error)
        return None
    except ValueError:
        logger.warning("Metadata request %s returned invalid JSON", path)
        return None

    if not isinstance(data, dict):
        logger.warning("Metadata request %s returned a non-object payload", path)
        return None

    return data


async def fetch_metadata(kind, media_id, params: dict | None = None) -> dict | None:
    return await fetch_json(f"/{metadata_kind(kind)}/{media_id}", params)


async def fetch_season(show_id, season_number: int) -> dict | None:
    return await fetch_json(f"/tv/{show_id}/season/{season_number}")


async def search_multi(query: str, page: int = 1) -> dict | None:
    return await fetch_json("/search/multi", {"query": query, "page": page})


async def fetch_trending(kind: str) -> dict | None:
    return await fetch_json(f"/trending/{metadata_kind(kind)}/week")
