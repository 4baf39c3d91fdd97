from __future__ import annotations

import logging
import warnings
from typing import Any, Callable, Sequence

import spotipy
from requests.exceptions import RequestException
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from mood_ring.errors import ApiError, NetworkError
from mood_ring.models import ArtistMatch, AudioFeatureSample, Credentials, Track
from mood_ring.mood import parse_audio_features

logger = logging.getLogger(__name__)


class CatalogClient:
    """Four calls against the Spotify Web API, each given the bearer token explicitly.

    Nothing here retries or caches; every failure surfaces as NetworkError or ApiError.
    """

    # Upper bound on top tracks kept per artist.
    TOP_TRACKS_LIMIT = 100

    def __init__(self, market: str = "US", requests_timeout: int = 5) -> None:
        self.market = market
        self.requests_timeout = requests_timeout

    def _client(self, token: str) -> spotipy.Spotify:
        return spotipy.Spotify(
            auth=token,
            requests_timeout=self.requests_timeout,
            retries=0,
            status_retries=0,
        )

    @staticmethod
    def _call(action: str, request: Callable[[], Any]) -> Any:
        try:
            return request()
        except SpotifyException as exc:
            raise ApiError(f"Spotify {action} failed with HTTP {exc.http_status}: {exc.msg}", exc.http_status) from exc
        except SpotifyOauthError as exc:
            raise ApiError(f"Spotify {action} was rejected: {exc}") from exc
        except RequestException as exc:
            raise NetworkError(f"Spotify {action} could not be reached: {exc}") from exc

    def fetch_access_token(self, credentials: Credentials) -> str:
        auth = SpotifyClientCredentials(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            requests_timeout=self.requests_timeout,
            cache_handler=MemoryCacheHandler(),
        )
        token = self._call("token exchange", lambda: auth.get_access_token(as_dict=False, check_cache=False))
        if not isinstance(token, str) or not token:
            raise ApiError("Spotify token exchange returned no access_token.")
        logger.info("Acquired Spotify access token")
        return token

    def search_artist_by_name(self, token: str, name: str) -> list[ArtistMatch]:
        page = self._call("artist search", lambda: self._client(token).search(q=name, type="artist", limit=1))
        try:
            items = page["artists"]["items"]
            return [ArtistMatch(id=item["id"], name=item["name"]) for item in items[:1]]
        except (KeyError, TypeError) as exc:
            raise ApiError(f"Malformed artist search response: {exc!r}") from exc

    def fetch_top_tracks(self, token: str, artist_id: str) -> list[Track]:
        page = self._call(
            "top tracks",
            lambda: self._client(token).artist_top_tracks(artist_id, country=self.market),
        )
        try:
            tracks = page["tracks"]
            return [Track(id=t["id"], name=t.get("name", "")) for t in tracks[: self.TOP_TRACKS_LIMIT]]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ApiError(f"Malformed top tracks response: {exc!r}") from exc

    def fetch_audio_features(self, token: str, track_ids: Sequence[str]) -> list[AudioFeatureSample]:
        if not track_ids:
            return []
        # One batch request; ids are not chunked against the endpoint's batch ceiling.
        entries = self._call("audio features", lambda: self._client(token).audio_features(list(track_ids)))
        if not isinstance(entries, list):
            raise ApiError("Malformed audio features response.")

        samples: list[AudioFeatureSample] = []
        for track_id, entry in zip(track_ids, entries):
            if entry is None:
                logger.warning("No audio features for track %s; skipping it", track_id)
                continue
            samples.append(parse_audio_features(entry))
        if len(entries) != len(track_ids):
            warnings.warn(
                f"Spotify returned {len(entries)} audio-feature entries for {len(track_ids)} track ids.",
                RuntimeWarning,
                stacklevel=2,
            )
        return samples
