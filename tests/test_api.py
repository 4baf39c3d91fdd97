import unittest
from unittest.mock import MagicMock, patch

from fastapi import HTTPException, Request

from mood_ring.api import (
    CATALOG_FAILURE_MESSAGE,
    MoodRequest,
    health_check,
    search_page,
    serve_index,
    summarize_artist_mood,
)
from mood_ring.config import Settings
from mood_ring.errors import ApiError, NetworkError
from mood_ring.models import ArtistMatch, AudioFeatureSample, Track

_SETTINGS = Settings(client_id="id", client_secret="secret")


def _fake_client(token: str = "tok") -> MagicMock:
    client = MagicMock()
    client.fetch_access_token.return_value = token
    client.search_artist_by_name.return_value = [ArtistMatch(id="a1", name="Muse")]
    client.fetch_top_tracks.return_value = [Track(id="t1")]
    client.fetch_audio_features.return_value = [
        AudioFeatureSample(danceability=0.82, energy=0.5, valence=0.1, acousticness=0.05),
    ]
    return client


def _request(path: str = "/") -> Request:
    return Request({"type": "http", "method": "GET", "path": path, "headers": [], "query_string": b""})


def _patched(client: MagicMock, settings: Settings = _SETTINGS):
    return (
        patch("mood_ring.api.get_settings", return_value=settings),
        patch("mood_ring.api.get_catalog_client", return_value=client),
    )


class IndexPageTests(unittest.TestCase):
    def test_page_load_stores_token_in_hidden_field(self) -> None:
        settings_patch, client_patch = _patched(_fake_client(token="tok-xyz"))
        with settings_patch, client_patch:
            response = serve_index(_request())

        self.assertEqual(response.status_code, 200)
        self.assertIn('value="tok-xyz"', response.body.decode())

    def test_token_failure_renders_error_without_token(self) -> None:
        client = _fake_client()
        client.fetch_access_token.side_effect = NetworkError("down")
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = serve_index(_request())

        page = response.body.decode()
        self.assertEqual(response.status_code, 503)
        self.assertIn('name="hidden_token" value=""', page)
        self.assertIn('<div id="alert">', page)

    def test_missing_credentials_is_server_error(self) -> None:
        settings_patch, client_patch = _patched(_fake_client(), Settings())
        with settings_patch, client_patch:
            response = serve_index(_request())

        self.assertEqual(response.status_code, 500)
        self.assertIn("SPOTIPY_CLIENT_ID", response.body.decode())


class SearchPageTests(unittest.TestCase):
    def test_search_renders_report_and_reuses_page_token(self) -> None:
        client = _fake_client()
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="Muse", token="page-token")

        page = response.body.decode()
        self.assertEqual(response.status_code, 200)
        client.fetch_access_token.assert_not_called()
        client.search_artist_by_name.assert_called_once_with("page-token", "Muse")
        self.assertIn("Muse&#39;s mood ring:", page)
        self.assertIn("Danceability: 82%", page)
        self.assertIn('value="page-token"', page)

    def test_not_found_shows_alert_with_name(self) -> None:
        client = _fake_client()
        client.search_artist_by_name.return_value = []
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="Nobody Band", token="tok")

        page = response.body.decode()
        self.assertIn("couldn&#39;t find an artist named Nobody Band", page)
        client.fetch_top_tracks.assert_not_called()
        client.fetch_audio_features.assert_not_called()

    def test_blank_search_is_bad_request(self) -> None:
        client = _fake_client()
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="  ", token="tok")

        self.assertEqual(response.status_code, 400)
        client.search_artist_by_name.assert_not_called()

    def test_catalog_failure_surfaces_alert(self) -> None:
        client = _fake_client()
        client.fetch_audio_features.side_effect = ApiError("boom", status=500)
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="Muse", token="tok")

        page = response.body.decode()
        self.assertEqual(response.status_code, 502)
        self.assertIn('<div id="alert">', page)
        self.assertIn('<div id="results-container" hidden>', page)

    def test_page_renders_weighted_rows_and_escapes_names(self) -> None:
        client = _fake_client()
        client.search_artist_by_name.return_value = [ArtistMatch(id="a1", name="<Muse>")]
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="Muse", token="tok")

        page = response.body.decode()
        self.assertIn('<h5 style="opacity:0.82">Danceability: 82%</h5>', page)
        self.assertIn('<h5 style="opacity:0.3">Acousticness: 5%</h5>', page)
        self.assertIn("&lt;Muse&gt;&#39;s mood ring:", page)
        self.assertNotIn("<Muse>", page)
        self.assertIn('<div id="alert" hidden>', page)
        self.assertIn('id="searchArtist" disabled>', page)

    def test_no_audio_features_shows_alert_and_reenables_search(self) -> None:
        client = _fake_client()
        client.fetch_top_tracks.return_value = []
        client.fetch_audio_features.return_value = []
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            response = search_page(_request("/search"), artist_name="Muse", token="tok")

        page = response.body.decode()
        self.assertEqual(response.status_code, 200)
        self.assertIn("Spotify has no audio features for that artist&#39;s top tracks.", page)
        self.assertIn('<div id="alert">', page)
        self.assertIn('<div id="results-container" hidden>', page)
        self.assertIn('id="searchArtist">', page)


class MoodApiTests(unittest.TestCase):
    def test_returns_rows_and_summary(self) -> None:
        settings_patch, client_patch = _patched(_fake_client(token="fresh"))
        with settings_patch, client_patch:
            response = summarize_artist_mood(MoodRequest(artist_name="Muse"))

        self.assertEqual(response.artist_name, "Muse")
        self.assertEqual(response.title, "Muse's mood ring:")
        self.assertEqual([r.text for r in response.rows][0], "Danceability: 82%")
        self.assertAlmostEqual(response.rows[3].weight, 0.3)
        self.assertAlmostEqual(response.summary["intensity"], 0.5)
        self.assertEqual(response.token, "fresh")

    def test_not_found_is_404(self) -> None:
        client = _fake_client()
        client.search_artist_by_name.return_value = []
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            with self.assertRaises(HTTPException) as exc:
                summarize_artist_mood(MoodRequest(artist_name="Nobody Band", token="tok"))

        self.assertEqual(exc.exception.status_code, 404)
        self.assertIn("Nobody Band", exc.exception.detail)

    def test_startup_token_failure_is_503(self) -> None:
        client = _fake_client()
        client.fetch_access_token.side_effect = ApiError("invalid_client", status=400)
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            with self.assertRaises(HTTPException) as exc:
                summarize_artist_mood(MoodRequest(artist_name="Muse"))

        self.assertEqual(exc.exception.status_code, 503)
        client.search_artist_by_name.assert_not_called()

    def test_no_audio_features_is_422(self) -> None:
        client = _fake_client()
        client.fetch_top_tracks.return_value = []
        client.fetch_audio_features.return_value = []
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            with self.assertRaises(HTTPException) as exc:
                summarize_artist_mood(MoodRequest(artist_name="Muse", token="tok"))

        self.assertEqual(exc.exception.status_code, 422)

    def test_catalog_failure_hides_upstream_detail(self) -> None:
        client = _fake_client()
        client.search_artist_by_name.side_effect = ApiError(
            "Spotify artist search failed with HTTP 500: https://api.spotify.com/v1/search", status=500
        )
        settings_patch, client_patch = _patched(client)
        with settings_patch, client_patch:
            with self.assertRaises(HTTPException) as exc:
                summarize_artist_mood(MoodRequest(artist_name="Muse", token="tok"))

        self.assertEqual(exc.exception.status_code, 502)
        self.assertEqual(exc.exception.detail, CATALOG_FAILURE_MESSAGE)
        self.assertNotIn("api.spotify.com", exc.exception.detail)

    def test_health(self) -> None:
        self.assertEqual(health_check(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
