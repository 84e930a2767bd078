"""Leaderboard domain: input sanitization, persistence and ranking."""

from .service import LeaderboardService, SubmissionResult
from .store import LeaderboardStore
from .validation import ScoreSubmission, parse_limit, sanitize_submission

__all__ = [
    'LeaderboardService',
    'LeaderboardStore',
    'ScoreSubmission',
    'SubmissionResult',
    'parse_limit',
    'sanitize_submission',
]
