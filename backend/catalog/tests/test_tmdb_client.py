from unittest.mock import AsyncMock, patch

import httpx
from django.test import TestCase, override_settings

from catalog import tmdb_client


def make_response(status_code, **kwargs):
    request = httpx.Request("GET", "https://metadata.test/api/movie/1")
    return httpx.Response(status_code, request=request, **kwargs)


class TmdbClientTests(TestCase):
    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_fetch_metadata_path_and_params(self, mock_get):
        mock_get.return_value = make_response(200, json={"id": 1, "title": "X"})

        with override_settings(TMDB_API_KEY="secret"):
            data = await tmdb_client.fetch_metadata("movie", 1)

        self.assertEqual(data["title"], "X")
        mock_get.assert_awaited_once_with(
            "https://metadata.test/api/movie/1",
            params={"api_key": "secret"},
        )

    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_anime_is_fetched_as_tv(self, mock_get):
        mock_get.return_value = make_response(200, json={})

        await tmdb_client.fetch_metadata("anime", 37854)

        self.assertEqual(mock_get.await_args.args[0], "https://metadata.test/api/tv/37854")

    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_season_path(self, mock_get):
        mock_get.return_value = make_response(200, json={"episodes": []})

        await tmdb_client.fetch_season("42", 3)

        self.assertEqual(mock_get.await_args.args[0], "https://metadata.test/api/tv/42/season/3")

    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_http_error_returns_none(self, mock_get):
        mock_get.return_value = make_response(404, json={"status_message": "nope"})

        with self.assertLogs("catalog.tmdb_client", level="WARNING"):
            self.assertIsNone(await tmdb_client.fetch_metadata("movie", 1))

    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_network_error_returns_none(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("down")

        with self.assertLogs("catalog.tmdb_client", level="WARNING"):
            self.assertIsNone(await tmdb_client.search_multi("dune"))

    @patch("httpx.AsyncClient.get", new_callable=AsyncMock)
    async def test_invalid_json_returns_none(self, mock_get):
        mock_get.return_value = make_response(200, content=b"<html>")

        with self.assertLogs("catalog.tmdb_client", level="WARNING"):
            self.assertIsNone(await tmdb_client.fetch_trending("movie"))
