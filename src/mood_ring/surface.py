from __future__ import annotations

from mood_ring.models import MoodSummary, ReportRow
from mood_ring.mood import as_percent, intensity_weight

# Region ids double as element ids and form field names in the rendered page.
SEARCH_INPUT = "artistName"
SEARCH_BUTTON = "searchArtist"
STORED_TOKEN = "hidden_token"
ALERT = "alert"
ERROR_MESSAGE = "errorMsg"
RESULTS_CONTAINER = "results-container"
RESULTS_TITLE = "results-title"

# (region, label, MoodSummary attribute), in display order.
REPORT_REGIONS: tuple[tuple[str, str, str], ...] = (
    ("danceability", "Danceability", "danceability"),
    ("intensity", "Intensity", "intensity"),
    ("euphoria", "Euphoria", "euphoria"),
    ("acousticness", "Acousticness", "acousticness"),
)


class PresentationSurface:
    """State of the mood ring page: one search box, an alert, a report and the token field.

    The orchestrator only talks to these accessors; page_context and render_text
    expose the current state to the page template and the terminal.
    """

    def __init__(self, search_input: str = "", stored_token: str = "") -> None:
        self._search_input = ""
        self._search_enabled = False
        self._stored_token = stored_token
        self._alert_visible = False
        self._error_message = ""
        self._results_visible = False
        self._results_title = ""
        self._rows: dict[str, ReportRow] = {}
        self.write_search_input(search_input)

    # search input

    def read_search_input(self) -> str:
        return self._search_input

    def write_search_input(self, value: str) -> None:
        self._search_input = value
        self.refresh_search_enabled()

    @property
    def search_enabled(self) -> bool:
        return self._search_enabled

    def set_search_enabled(self, enabled: bool) -> None:
        self._search_enabled = enabled

    def refresh_search_enabled(self) -> None:
        self.set_search_enabled(self._search_input.strip() != "")

    def reset_search_input(self) -> None:
        self._search_input = ""
        self.set_search_enabled(False)

    # token

    def read_stored_token(self) -> str:
        return self._stored_token

    def write_stored_token(self, token: str) -> None:
        self._stored_token = token

    # alert

    @property
    def alert_visible(self) -> bool:
        return self._alert_visible

    @property
    def error_message(self) -> str:
        return self._error_message

    def show_error(self, message: str) -> None:
        self._results_visible = False
        self._error_message = message
        self._alert_visible = True

    def clear_error(self) -> None:
        self._alert_visible = False

    # report

    @property
    def results_visible(self) -> bool:
        return self._results_visible

    @property
    def results_title(self) -> str:
        return self._results_title

    def render_mood_summary(self, summary: MoodSummary, artist_name: str) -> None:
        self._results_title = f"{artist_name}'s mood ring:"
        self._rows = {}
        for region, label, attr in REPORT_REGIONS:
            value = getattr(summary, attr)
            self._rows[region] = ReportRow(
                region=region,
                label=label,
                percent=as_percent(value),
                weight=intensity_weight(value),
            )
        self._results_visible = True

    def report_row(self, region: str) -> ReportRow | None:
        return self._rows.get(region)

    def report_rows(self) -> list[ReportRow]:
        return [self._rows[region] for region, _, _ in REPORT_REGIONS if region in self._rows]

    # output

    def page_context(self) -> dict:
        """Template variables for templates/index.html."""
        return {
            "regions": {
                "search_input": SEARCH_INPUT,
                "search_button": SEARCH_BUTTON,
                "stored_token": STORED_TOKEN,
                "alert": ALERT,
                "error_message": ERROR_MESSAGE,
                "results": RESULTS_CONTAINER,
                "results_title": RESULTS_TITLE,
            },
            "search_input": self._search_input,
            "search_enabled": self._search_enabled,
            "stored_token": self._stored_token,
            "alert_visible": self._alert_visible,
            "error_message": self._error_message,
            "results_visible": self._results_visible,
            "results_title": self._results_title,
            "rows": self.report_rows(),
        }

    def render_text(self) -> str:
        lines: list[str] = []
        if self._alert_visible:
            lines.append(self._error_message)
        if self._results_visible:
            lines.append(self._results_title)
            lines.extend(f"  {row.text}" for row in self.report_rows())
        return "\n".join(lines)
