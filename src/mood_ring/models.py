from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Credentials:
    client_id: str
    client_secret: str = field(repr=False)


@dataclass(slots=True)
class ArtistMatch:
    id: str
    name: str


@dataclass(slots=True)
class Track:
    id: str
    name: str = ""


@dataclass(slots=True)
class AudioFeatureSample:
    danceability: float
    energy: float
    valence: float
    acousticness: float


@dataclass(slots=True)
class MoodSummary:
    danceability: float
    intensity: float
    euphoria: float
    acousticness: float


@dataclass(slots=True)
class ReportRow:
    region: str
    label: str
    percent: int
    weight: float

    @property
    def text(self) -> str:
        return f"{self.label}: {self.percent}%"


@dataclass(slots=True)
class MoodReport:
    artist_name: str
    summary: MoodSummary
