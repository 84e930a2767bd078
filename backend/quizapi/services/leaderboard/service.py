import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from quizapi.errors import NonFatalAssociationError, StorageError
from quizapi.models import ScoreEntry
from .validation import DEFAULT_LIMIT, MAX_LIMIT, ScoreSubmission, parse_limit, sanitize_submission


@dataclass
class SubmissionResult:
    entry: ScoreEntry
    achievement_error: Optional[NonFatalAssociationError] = None


class LeaderboardService:
    """Ranked reads and two-phase score submission.

    Phase one (``record_score``) inserts the score row and is fatal on
    failure. Phase two (``record_achievements``) records the player's
    achievements and only reports its failure on the result.
    """

    def __init__(self, store, logger=None, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.default_limit = default_limit
        self.max_limit = max_limit

    def top_scores(self, raw_limit: Any = None) -> List[ScoreEntry]:
        limit = parse_limit(raw_limit, default=self.default_limit, maximum=self.max_limit)
        try:
            return self.store.fetch_top(limit)
        except StorageError as exc:
            self.logger.error(f"[leaderboard-select] limit={limit} error={exc.__cause__ or exc}")
            raise

    def submit(self, data: Any) -> SubmissionResult:
        submission = sanitize_submission(data)
        entry = self.record_score(submission)
        achievement_error = self.record_achievements(submission)
        return SubmissionResult(entry=entry, achievement_error=achievement_error)

    def record_score(self, submission: ScoreSubmission) -> ScoreEntry:
        try:
            entry = self.store.insert_score(submission)
        except StorageError as exc:
            self.logger.error(
                f"[leaderboard-insert] player={submission.player_name!r} score={submission.score} error={exc.__cause__ or exc}"
            )
            raise
        self.logger.info(f"[leaderboard-insert] id={entry.id} player={entry.player_name!r} score={entry.score}")
        return entry

    def record_achievements(self, submission: ScoreSubmission) -> Optional[NonFatalAssociationError]:
        if not submission.achievements:
            return None
        try:
            self.store.upsert_achievements(submission.player_name, submission.achievements)
        except StorageError as exc:
            cause = exc.__cause__ or exc
            self.logger.warning(
                f"[achievements-upsert] player={submission.player_name!r} ids={submission.achievements} error={cause}"
            )
            return NonFatalAssociationError(submission.player_name, submission.achievements, cause)
        return None
