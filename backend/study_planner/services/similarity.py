"""String similarity used to match free-text check-ins against tasks."""
from __future__ import annotations

from rapidfuzz.distance import JaroWinkler

from study_planner.core.config import settings

# Scores at or above this count as a match.
DEFAULT_MATCH_THRESHOLD = 0.7


def similarity(text: str, target: str) -> float:
    """Return the Jaro-Winkler similarity of text and target in [0.0, 1.0].

    Prefix weight is 0.1 over at most four characters and only applies once the
    Jaro score exceeds 0.7. Callers pass the user's input first and the task
    content second; the score itself does not depend on that order. Identical
    strings, including two empty strings, score 1.0.
    """
    if text == target:
        return 1.0
    return float(JaroWinkler.similarity(text, target))


def is_match(text: str, target: str, threshold: float | None = None) -> bool:
    limit = match_threshold() if threshold is None else threshold
    return similarity(text, target) >= limit


def match_threshold() -> float:
    """Configured threshold, falling back to DEFAULT_MATCH_THRESHOLD."""
    return settings.match_threshold if settings.match_threshold is not None else DEFAULT_MATCH_THRESHOLD
