from typing import Iterable, List

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from quizapi.errors import StorageError
from quizapi.models import PlayerAchievement, ScoreEntry
from .validation import ScoreSubmission

_CONFLICT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


class LeaderboardStore:
    """SQLAlchemy access to ``leaderboard_scores`` and ``player_achievements``.

    Every failure is rolled back and re-raised as ``StorageError`` with the
    original exception chained; callers decide whether it is fatal.
    """

    def __init__(self, session):
        self.session = session

    def fetch_top(self, limit: int) -> List[ScoreEntry]:
        try:
            return (
                self.session.query(ScoreEntry)
                .order_by(ScoreEntry.score.desc(), ScoreEntry.created_at.desc(), ScoreEntry.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError('Failed to load leaderboard') from exc

    def insert_score(self, submission: ScoreSubmission) -> ScoreEntry:
        entry = ScoreEntry(
            player_name=submission.player_name,
            score=submission.score,
            stage=submission.stage,
            total_correct=submission.total_correct,
            achievements=list(submission.achievements),
        )
        try:
            self.session.add(entry)
            self.session.commit()
            self.session.refresh(entry)
            # Detached so a later rollback cannot expire it
            self.session.expunge(entry)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError('Failed to save score') from exc
        return entry

    def _conflict_insert(self):
        dialect = self.session.get_bind().dialect.name
        try:
            return _CONFLICT_INSERTS[dialect]
        except KeyError:
            raise StorageError(f"No conflict-ignoring insert for dialect {dialect!r}") from None

    def upsert_achievements(self, player_name: str, achievement_ids: Iterable[str]) -> int:
        """Insert (player, achievement) pairs, skipping ones already recorded.

        Returns the number of distinct pairs submitted.
        """
        rows = [
            {'player_name': player_name, 'achievement_id': aid}
            for aid in dict.fromkeys(achievement_ids)
        ]
        if not rows:
            return 0
        try:
            stmt = self._conflict_insert()(PlayerAchievement).values(rows).on_conflict_do_nothing(
                index_elements=['player_name', 'achievement_id']
            )
            self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError('Failed to record achievements') from exc
        return len(rows)

