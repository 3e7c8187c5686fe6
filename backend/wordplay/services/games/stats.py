from typing import Dict, List, Optional

from sqlalchemy import func

from wordplay import db
from wordplay.models import GameScore, User, UserStats
from wordplay.schemas import GameResultIn
from .scoring import round_half_up, streak_bonus


def fold_stats(stats: UserStats, result: GameScore) -> UserStats:
    """Fold one completed game into a user's running totals.

    The streak here counts consecutive games with at least one correct word,
    and ``longest_streak`` is the highest such streak ever reached.
    """
    total_games = (stats.total_games or 0) + 1
    total_score = (stats.total_score or 0) + result.score

    stats.average_time = round_half_up(
        ((stats.average_time or 0) * (total_games - 1) + (result.average_time or 0)) / total_games
    )
    stats.total_games = total_games
    stats.total_score = total_score
    stats.average_score = round_half_up(total_score / total_games)
    stats.best_score = max(stats.best_score or 0, result.score)
    stats.total_words_correct = (stats.total_words_correct or 0) + result.words_correct

    if result.words_correct > 0:
        stats.current_streak = (stats.current_streak or 0) + 1
    else:
        stats.current_streak = 0
    stats.longest_streak = max(stats.longest_streak or 0, stats.current_streak)
    stats.bonus_points = (stats.bonus_points or 0) + streak_bonus(stats.current_streak)
    stats.favorite_game_mode = result.game_mode
    return stats


def submit_game_result(user_id: int, result: GameResultIn) -> GameScore:
    """Persist a finished game and update the owner's stats in one transaction."""
    record = GameScore(
        user_id=user_id,
        game_mode=result.game_mode,
        score=result.score,
        words_correct=result.words_correct,
        total_words=result.total_words,
        average_time=result.average_time,
        longest_streak=result.longest_streak,
        game_data=result.game_data,
    )
    try:
        db.session.add(record)
        stats = UserStats.query.filter_by(user_id=user_id).first()
        if stats is None:
            stats = UserStats(user_id=user_id)
            db.session.add(stats)
        fold_stats(stats, record)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return record


def get_user_stats(user_id: int) -> Optional[UserStats]:
    return UserStats.query.filter_by(user_id=user_id).first()


def get_user_scores(user_id: int, limit: int = 50) -> List[GameScore]:
    return (
        GameScore.query.filter_by(user_id=user_id)
        .order_by(GameScore.created_at.desc(), GameScore.id.desc())
        .limit(limit)
        .all()
    )


def get_leaderboard(game_mode: Optional[str] = None, limit: int = 50) -> List[Dict]:
    """Users ranked by best score, highest first.

    With ``game_mode`` the ranking uses each user's best score in that mode
    only; the embedded stats are still the user's overall totals.
    """
    if game_mode:
        best = func.max(GameScore.score).label('best')
        rows = (
            db.session.query(User, UserStats, best)
            .join(GameScore, GameScore.user_id == User.id)
            .join(UserStats, UserStats.user_id == User.id)
            .filter(GameScore.game_mode == game_mode)
            .group_by(User.id, UserStats.id)
            .order_by(best.desc(), User.id)
            .limit(limit)
            .all()
        )
        board = []
        for rank, (user, stats, mode_best) in enumerate(rows, start=1):
            entry = {'user': user.to_dict(), 'stats': stats.to_dict(), 'rank': rank}
            entry['stats']['modeBestScore'] = mode_best
            board.append(entry)
        return board

    rows = (
        db.session.query(User, UserStats)
        .join(UserStats, UserStats.user_id == User.id)
        .order_by(UserStats.best_score.desc(), User.id)
        .limit(limit)
        .all()
    )
    return [
        {'user': user.to_dict(), 'stats': stats.to_dict(), 'rank': rank}
        for rank, (user, stats) in enumerate(rows, start=1)
    ]
