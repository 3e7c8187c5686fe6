"""Point values for every game mode.

Everything here is a pure function of its arguments. Anagram rounds use the
linear-decay formula only; the flat-base-plus-time-bonus variant is not used
anywhere.
"""
import math
from typing import Iterable

ANAGRAM_CEILING = 100
ANAGRAM_FLOOR = 20
ANAGRAM_DECAY_PER_SEC = 2

LADDER_WIN_BASE = 1000
LADDER_TIME_BONUS_PER_SEC = 10
LADDER_STEP_BONUS = 100

SPEED_TYPE_POINTS_PER_LETTER = 10
STREAK_BONUS_PER_GAME = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def anagram_points(elapsed_seconds: int) -> int:
    """100 points for an instant solve, minus 2 per elapsed second, never below 20."""
    return max(ANAGRAM_CEILING - ANAGRAM_DECAY_PER_SEC * max(0, elapsed_seconds), ANAGRAM_FLOOR)


def ladder_win_score(seconds_remaining: int, chain_length: int, max_attempts: int) -> int:
    """Score for reaching the ladder target.

    Rewards time left on the clock and short chains. ``chain_length`` counts
    the start word and the target.
    """
    time_bonus = max(0, LADDER_TIME_BONUS_PER_SEC * seconds_remaining)
    step_bonus = max(0, LADDER_STEP_BONUS * (max_attempts - chain_length))
    return LADDER_WIN_BASE + time_bonus + step_bonus


def speed_type_points(word: str) -> int:
    return SPEED_TYPE_POINTS_PER_LETTER * len(word)


def words_per_minute(word_count: int, elapsed_seconds: float) -> int:
    # Denominator floored at 0.1 minutes
    minutes = max(elapsed_seconds / 60.0, 0.1)
    return round_half_up(word_count / minutes)


def accuracy(correct_characters: int, total_characters: int) -> int:
    if total_characters <= 0:
        return 100
    return round_half_up(correct_characters / total_characters * 100)


def streak_bonus(streak: int) -> int:
    return max(0, streak) * STREAK_BONUS_PER_GAME


def longest_streak(correct_flags: Iterable[bool]) -> int:
    best = run = 0
    for correct in correct_flags:
        run = run + 1 if correct else 0
        best = max(best, run)
    return best


def encouragement(points: int, streak: int) -> str:
    if streak >= 5:
        return "You're on fire! Amazing streak!"
    if streak >= 3:
        return "Great streak! Keep it going!"
    if points >= 80:
        return "Excellent solve time!"
    if points >= 60:
        return "Nice work!"
    return "Keep trying!"


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"
