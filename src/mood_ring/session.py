from __future__ import annotations

import enum
import logging
import threading

from mood_ring.catalog_client import CatalogClient
from mood_ring.errors import (
    ArtistNotFoundError,
    CatalogError,
    EmptySearchError,
    SearchInProgressError,
    SessionStateError,
    StartupTokenError,
)
from mood_ring.models import Credentials, MoodReport
from mood_ring.mood import summarize_mood
from mood_ring.surface import PresentationSurface

logger = logging.getLogger(__name__)

NOT_FOUND_TEMPLATE = "Sorry, we couldn't find an artist named {name}. Please try a new search."


class SessionState(enum.Enum):
    IDLE = "idle"
    TOKEN_PENDING = "token_pending"
    READY = "ready"
    SEARCHING = "searching"


def not_found_message(name: str) -> str:
    return NOT_FOUND_TEMPLATE.format(name=name)


class MoodRingSession:
    """Drives one page session: token on start, then artist searches on demand."""

    def __init__(self, client: CatalogClient, surface: PresentationSurface, credentials: Credentials) -> None:
        self.client = client
        self.surface = surface
        self.credentials = credentials
        self.state = SessionState.IDLE
        self._search_lock = threading.Lock()

    def start(self) -> None:
        if self.state is not SessionState.IDLE:
            raise SessionStateError(f"Cannot start a session that is {self.state.value}.")

        self.state = SessionState.TOKEN_PENDING
        try:
            token = self.client.fetch_access_token(self.credentials)
        except CatalogError as exc:
            self.state = SessionState.IDLE
            raise StartupTokenError(f"Could not obtain a Spotify access token: {exc}") from exc

        self.surface.write_stored_token(token)
        self.state = SessionState.READY

    def resume(self) -> None:
        """Adopt the token the page already carries, or fetch one if it carries none."""
        if self.surface.read_stored_token():
            self.state = SessionState.READY
            return
        self.start()

    def search(self) -> MoodReport | None:
        if self.state is SessionState.SEARCHING:
            raise SearchInProgressError("A search is already running for this session.")
        if self.state is not SessionState.READY:
            raise SessionStateError(f"Search requires a ready session, not {self.state.value}.")

        name = self.surface.read_search_input()
        if not name.strip():
            raise EmptySearchError("Artist name must not be empty.")

        if not self._search_lock.acquire(blocking=False):
            raise SearchInProgressError("A search is already running for this session.")
        try:
            self.state = SessionState.SEARCHING
            self.surface.clear_error()
            self.surface.set_search_enabled(False)
            return self._run_search(name)
        finally:
            self.state = SessionState.READY
            self._search_lock.release()

    def _run_search(self, name: str) -> MoodReport | None:
        token = self.surface.read_stored_token()

        matches = self.client.search_artist_by_name(token, name)
        if not matches:
            logger.warning("No artist found for %r", name)
            self.surface.show_error(not_found_message(name))
            self.surface.reset_search_input()
            return None

        artist = matches[0]
        logger.info("Resolved artist %r to %s (%s)", name, artist.name, artist.id)
        tracks = self.client.fetch_top_tracks(token, artist.id)
        samples = self.client.fetch_audio_features(token, [t.id for t in tracks])
        summary = summarize_mood(samples)

        self.surface.render_mood_summary(summary, artist.name)
        self.surface.reset_search_input()
        logger.info("Rendered mood ring for %s from %d tracks", artist.name, len(samples))
        return MoodReport(artist_name=artist.name, summary=summary)


def lookup_mood(session: MoodRingSession, artist_name: str) -> MoodReport:
    """Type a name into the session's search box and run it, for callers without a page."""
    session.surface.write_search_input(artist_name)
    report = session.search()
    if report is None:
        raise ArtistNotFoundError(session.surface.error_message)
    return report
