from __future__ import annotations

import math
from typing import Sequence

from mood_ring.errors import ApiError, EmptyFeatureSetError
from mood_ring.models import AudioFeatureSample, MoodSummary

# Rows never fade below this so low scores stay legible.
MIN_INTENSITY_WEIGHT = 0.3


def parse_audio_features(raw: dict) -> AudioFeatureSample:
    try:
        return AudioFeatureSample(
            danceability=float(raw["danceability"]),
            energy=float(raw["energy"]),
            valence=float(raw["valence"]),
            acousticness=float(raw["acousticness"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ApiError(f"Malformed audio-features entry: {exc!r}") from exc


def _mean(values: list[float]) -> float:
    return math.fsum(values) / len(values)


def summarize_mood(samples: Sequence[AudioFeatureSample]) -> MoodSummary:
    """Average the four mood scores across one artist's tracks.

    Raises EmptyFeatureSetError rather than dividing by zero.
    """

    if not samples:
        raise EmptyFeatureSetError("Cannot summarize mood without any audio-feature samples.")

    return MoodSummary(
        danceability=_mean([s.danceability for s in samples]),
        intensity=_mean([s.energy for s in samples]),
        euphoria=_mean([s.valence for s in samples]),
        acousticness=_mean([s.acousticness for s in samples]),
    )


def as_percent(value: float) -> int:
    # Half rounds up (0.125 -> 13), unlike round()'s banker's rounding.
    return int(math.floor(value * 100 + 0.5))


def intensity_weight(value: float) -> float:
    return max(MIN_INTENSITY_WEIGHT, value)
