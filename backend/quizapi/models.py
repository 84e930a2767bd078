from datetime import datetime, timezone

from quizapi import db

PLAYER_NAME_MAX_LENGTH = 30


def _utcnow():
    return datetime.now(timezone.utc)


class ScoreEntry(db.Model):
    __tablename__ = 'leaderboard_scores'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(PLAYER_NAME_MAX_LENGTH), nullable=False, index=True)
    score = db.Column(db.Float, nullable=False)
    stage = db.Column(db.Integer, nullable=False, default=1)
    total_correct = db.Column(db.Integer, nullable=False, default=0)
    achievements = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        db.CheckConstraint('score >= 0', name='ck_leaderboard_scores_score'),
        db.CheckConstraint('stage >= 1', name='ck_leaderboard_scores_stage'),
        db.CheckConstraint('total_correct >= 0', name='ck_leaderboard_scores_total_correct'),
        db.Index('ix_leaderboard_scores_ranking', 'score', 'created_at'),
    )

    def to_dict(self):
        score = self.score
        if score is not None and float(score).is_integer():
            score = int(score)
        return {
            'id': self.id,
            'player_name': self.player_name,
            'score': score,
            'stage': self.stage,
            'total_correct': self.total_correct,
            'achievements': list(self.achievements or []),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ScoreEntry {self.player_name}: {self.score} stage={self.stage}>"


class PlayerAchievement(db.Model):
    __tablename__ = 'player_achievements'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(PLAYER_NAME_MAX_LENGTH), nullable=False)
    achievement_id = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    __table_args__ = (
        db.UniqueConstraint('player_name', 'achievement_id', name='uq_player_achievements_player_achievement'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'player_name': self.player_name,
            'achievement_id': self.achievement_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
