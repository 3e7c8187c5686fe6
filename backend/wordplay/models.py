from datetime import datetime, timezone

from wordplay import db, bcrypt
from flask_login import UserMixin


def _utcnow():
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    first_name = db.Column(db.String(255), nullable=True)
    last_name = db.Column(db.String(255), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    scores = db.relationship('GameScore', back_populates='user', lazy='dynamic')
    stats = db.relationship('UserStats', back_populates='user', uselist=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self, include_stats=False):
        data = {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }
        if include_stats:
            data['stats'] = self.stats.to_dict() if self.stats else None
        return data


class GameScore(db.Model):
    """One row per completed game. Rows are never updated after insert."""
    __tablename__ = 'game_score'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    game_mode = db.Column(db.String(32), nullable=False)  # anagram, word_ladder, speed_type
    score = db.Column(db.Integer, nullable=False)
    words_correct = db.Column(db.Integer, nullable=False)
    total_words = db.Column(db.Integer, nullable=False)
    average_time = db.Column(db.Integer, nullable=True)  # milliseconds
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    game_data = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, index=True)
    user = db.relationship('User', back_populates='scores')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'gameMode': self.game_mode,
            'score': self.score,
            'wordsCorrect': self.words_correct,
            'totalWords': self.total_words,
            'averageTime': self.average_time,
            'longestStreak': self.longest_streak,
            'gameData': self.game_data,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class UserStats(db.Model):
    __tablename__ = 'user_stats'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, unique=True)
    total_games = db.Column(db.Integer, nullable=False, default=0)
    total_score = db.Column(db.Integer, nullable=False, default=0)
    best_score = db.Column(db.Integer, nullable=False, default=0)
    average_score = db.Column(db.Integer, nullable=False, default=0)
    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    total_words_correct = db.Column(db.Integer, nullable=False, default=0)
    average_time = db.Column(db.Integer, nullable=False, default=0)  # milliseconds
    bonus_points = db.Column(db.Integer, nullable=False, default=0)
    favorite_game_mode = db.Column(db.String(32), nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    user = db.relationship('User', back_populates='stats')

    def to_dict(self):
        return {
            'totalGames': self.total_games,
            'totalScore': self.total_score,
            'bestScore': self.best_score,
            'averageScore': self.average_score,
            'currentStreak': self.current_streak,
            'longestStreak': self.longest_streak,
            'totalWordsCorrect': self.total_words_correct,
            'averageTime': self.average_time,
            'bonusPoints': self.bonus_points,
            'favoriteGameMode': self.favorite_game_mode,
        }
