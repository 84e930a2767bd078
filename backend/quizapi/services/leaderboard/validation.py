import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from quizapi.errors import InvalidInput
from quizapi.models import PLAYER_NAME_MAX_LENGTH

DEFAULT_PLAYER_NAME = 'Guest'
DEFAULT_LIMIT = 10
MAX_LIMIT = 50

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)', re.ASCII)
# INTEGER column range
_MAX_INT = 2 ** 31 - 1


@dataclass
class ScoreSubmission:
    """A sanitized POST /leaderboard body, ready to persist."""
    player_name: str
    score: float
    stage: int = 1
    total_correct: int = 0
    achievements: List[str] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def _as_integer(value: Any) -> Optional[int]:
    """Return ``value`` as an int when it is an integral number, else None."""
    if not _is_number(value):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if abs(value) > _MAX_INT:
        return None
    return value


def parse_limit(raw: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """Parse the ``limit`` query parameter.

    Takes the leading integer of the string ("12abc" -> 12, "3.7" -> 3).
    Missing, non-numeric and non-positive values fall back to ``default``;
    anything above ``maximum`` is clamped.
    """
    limit = None
    if _is_number(raw):
        limit = int(raw)
    elif isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        if match:
            limit = int(match.group(1))
    if limit is None or limit <= 0:
        limit = default
    return min(limit, maximum)


def sanitize_player_name(raw: Any) -> str:
    if not raw:
        return DEFAULT_PLAYER_NAME
    name = str(raw).strip()[:PLAYER_NAME_MAX_LENGTH]
    return name or DEFAULT_PLAYER_NAME


def sanitize_achievements(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    cleaned = (str(a).strip() for a in raw)
    return [a for a in cleaned if a]


def sanitize_submission(data: Any) -> ScoreSubmission:
    """Validate a score submission body.

    Only ``score`` is strictly required; the other fields are coerced to
    their defaults when missing or malformed. Raises ``InvalidInput`` when
    the score is not a finite, non-negative number.
    """
    if not isinstance(data, dict):
        data = {}

    player_name = sanitize_player_name(data.get('playerName'))

    score = data.get('score')
    if not _is_number(score) or not _is_finite(score) or score < 0:
        raise InvalidInput('Invalid "score". Must be a non-negative number.')

    stage = _as_integer(data.get('stage'))
    if stage is None or stage <= 0:
        stage = 1

    total_correct = _as_integer(data.get('totalCorrect'))
    if total_correct is None or total_correct < 0:
        total_correct = 0

    return ScoreSubmission(
        player_name=player_name,
        score=score,
        stage=stage,
        total_correct=total_correct,
        achievements=sanitize_achievements(data.get('achievements')),
    )
