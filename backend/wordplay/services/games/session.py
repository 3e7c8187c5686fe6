"""Round/timer state machine shared by the three mini-games.

A ``GameSession`` moves ``NOT_STARTED -> IN_PROGRESS -> ENDED``. While in
progress each round is presented, answered (correct or not) and then either
advances or ends the game. Every public operation takes the session lock, so
user input and timer ticks are applied one at a time, and every misuse
(answer after the end, hint over budget, double start) is a silent no-op.
"""
import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from . import scoring
from .puzzles import Puzzle, anagram_puzzle, is_valid_anagram_solution, ladder_puzzle
from .scheduler import RoundTimer
from .words import (
    difficulty_for_score,
    is_ladder_word,
    is_valid_word,
    random_word_by_length,
    word_length_for_difficulty,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    NOT_STARTED = 'not_started'
    IN_PROGRESS = 'in_progress'
    ENDED = 'ended'


class GameMode(str, Enum):
    ANAGRAM = 'anagram'
    WORD_LADDER = 'word_ladder'
    SPEED_TYPE = 'speed_type'


class OutcomeKind(str, Enum):
    PENDING = 'pending'
    CORRECT = 'correct'
    INCORRECT = 'incorrect'
    TIMED_OUT = 'timed_out'


@dataclass(frozen=True)
class RoundOutcome:
    kind: OutcomeKind
    points: int = 0
    message: str = ''

    @classmethod
    def pending(cls, message: str = '') -> 'RoundOutcome':
        return cls(OutcomeKind.PENDING, 0, message)

    @classmethod
    def correct(cls, points: int, message: str = '') -> 'RoundOutcome':
        return cls(OutcomeKind.CORRECT, points, message)

    @classmethod
    def incorrect(cls, message: str = '') -> 'RoundOutcome':
        return cls(OutcomeKind.INCORRECT, 0, message)

    @classmethod
    def timed_out(cls, message: str = "Time's up!") -> 'RoundOutcome':
        return cls(OutcomeKind.TIMED_OUT, 0, message)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'points': self.points, 'message': self.message}


@dataclass(frozen=True)
class RoundResult:
    word: Union[str, Tuple[str, ...]]
    elapsed_seconds: int
    points_awarded: int
    outcome: OutcomeKind = OutcomeKind.CORRECT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'word': list(self.word) if isinstance(self.word, tuple) else self.word,
            'time': self.elapsed_seconds,
            'points': self.points_awarded,
            'outcome': self.outcome.value,
        }


@dataclass(frozen=True)
class GameSummary:
    mode: GameMode
    score: int
    words_correct: int
    total_words: int
    average_time_ms: int
    longest_streak: int
    won: Optional[bool] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Body for ``POST /api/game/score``."""
        return {
            'gameMode': self.mode.value,
            'score': self.score,
            'wordsCorrect': self.words_correct,
            'totalWords': self.total_words,
            'averageTime': self.average_time_ms,
            'longestStreak': self.longest_streak,
            'gameData': self.detail,
        }


def normalize_answer(text: Optional[str]) -> str:
    return (text or '').strip().upper()


class GameSession:
    mode: GameMode

    def __init__(
        self,
        time_limit: int,
        total_rounds: int = 1,
        max_hints: int = 0,
        interval: float = 1.0,
        spawn: Optional[Callable] = None,
        sleep: Optional[Callable[[float], None]] = None,
        heartbeat: int = 0,
        on_end: Optional[Callable[['GameSession', GameSummary], None]] = None,
        on_change: Optional[Callable[['GameSession'], None]] = None,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None,
        user_id: Optional[int] = None,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.user_id = user_id
        self.time_limit = time_limit
        self.total_rounds = total_rounds
        self.max_hints = max_hints
        self.on_end = on_end
        self.on_change = on_change
        self.rng = rng or random.Random()
        self._lock = threading.RLock()
        self._timer = RoundTimer(
            self._on_timer_tick,
            interval=interval,
            spawn=spawn,
            sleep=sleep,
            heartbeat=heartbeat,
            label=f"session={self.id} mode={self.mode.value}",
        )
        self.notifications: List[str] = []
        self._clear()

    def _clear(self) -> None:
        self.status = SessionStatus.NOT_STARTED
        self.current_round_index = 0
        self.time_remaining = self.time_limit
        self.score = 0
        self.hints_used = 0
        self.hints: List[str] = []
        self.history: List[RoundResult] = []
        self.puzzle: Optional[Puzzle] = None
        self.last_outcome = RoundOutcome.pending()
        self.summary: Optional[GameSummary] = None
        self.won: Optional[bool] = None

    # -- timer ---------------------------------------------------------------

    @property
    def timer(self) -> RoundTimer:
        return self._timer

    def cancel_pending_tick(self) -> None:
        self._timer.cancel()

    def _on_timer_tick(self, generation: int) -> None:
        with self._lock:
            # A tick that lost the race with a submission, reset or round
            # change belongs to a closed generation
            if not self._timer.is_current(generation):
                return
            self.tick()

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> bool:
        with self._lock:
            if self.status != SessionStatus.NOT_STARTED:
                return False
            self._clear()
            self.status = SessionStatus.IN_PROGRESS
            self._begin_round(0)
            logger.info(f"[session-start] session={self.id} mode={self.mode.value} rounds={self.total_rounds}")
            self._changed()
            return True

    def submit_answer(self, text: Optional[str]) -> Optional[RoundOutcome]:
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS:
                return None
            answer = normalize_answer(text)
            if not answer:
                return None
            outcome = self._check_answer(answer)
            if outcome is None:
                return None
            self.last_outcome = outcome
            self._changed()
            return outcome

    def use_hint(self) -> Optional[str]:
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS or self.hints_used >= self.max_hints:
                return None
            reveal = self._hint_for(len(self.hints))
            if reveal is None:
                return None
            self.hints_used += 1
            self.hints.append(reveal)
            self._changed()
            return reveal

    def tick(self, round_index: Optional[int] = None) -> Optional[RoundOutcome]:
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS:
                return None
            if round_index is not None and round_index != self.current_round_index:
                return None
            if self.time_remaining > 0:
                self.time_remaining -= 1
            if self.time_remaining > 0:
                self._changed()
                return RoundOutcome.pending()
            outcome = RoundOutcome.timed_out()
            self.last_outcome = outcome
            logger.info(f"[round-timeout] session={self.id} round={self.current_round_index + 1}")
            self._on_timeout()
            self._changed()
            return outcome

    def end(self) -> Optional[GameSummary]:
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS:
                return None
            summary = self._finish()
            self._changed()
            return summary

    def reset(self) -> None:
        with self._lock:
            self.cancel_pending_tick()
            self._clear()
            self.notifications = []
            logger.info(f"[session-reset] session={self.id}")
            self._changed()

    def notify(self, message: str) -> None:
        with self._lock:
            self.notifications.append(message)
            self._changed()

    # -- round plumbing ------------------------------------------------------

    @property
    def elapsed_seconds(self) -> int:
        return self.time_limit - self.time_remaining

    def _begin_round(self, index: int) -> None:
        self.current_round_index = index
        self.time_remaining = self.time_limit
        self.hints = []
        self.puzzle = self._new_puzzle()
        self._timer.start()

    def _advance(self) -> None:
        if self.current_round_index + 1 < self.total_rounds:
            self._begin_round(self.current_round_index + 1)
        else:
            self._finish()

    def _finish(self) -> GameSummary:
        self.cancel_pending_tick()
        self.status = SessionStatus.ENDED
        self.summary = self._summarize()
        logger.info(
            f"[session-end] session={self.id} mode={self.mode.value} score={self.score} "
            f"correct={self.summary.words_correct}/{self.summary.total_words} won={self.won}"
        )
        if self.on_end is not None:
            try:
                self.on_end(self, self.summary)
            except Exception:
                logger.exception(f"[session-end] session={self.id} end hook failed")
                self.notifications.append('Score not saved')
        return self.summary

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _hint_for(self, index: int) -> Optional[str]:
        word = self.puzzle.answer if self.puzzle else ''
        if index == 0 and word:
            return f"Starts with {word[0]}"
        if index == 1 and len(word) > 1:
            return f"Ends with {word[-1]}"
        if index == 2 and len(word) > 2:
            middle = len(word) // 2
            return f"Letter {middle + 1} is {word[middle]}"
        return None

    # -- per-mode hooks ------------------------------------------------------

    def _new_puzzle(self) -> Optional[Puzzle]:
        raise NotImplementedError

    def _check_answer(self, answer: str) -> Optional[RoundOutcome]:
        raise NotImplementedError

    def _on_timeout(self) -> None:
        self.won = False
        self._finish()

    def _correct_flags(self) -> List[bool]:
        return [r.outcome == OutcomeKind.CORRECT for r in self.history]

    def _summarize(self) -> GameSummary:
        raise NotImplementedError

    def _extra_state(self) -> Dict[str, Any]:
        return {}

    # -- views ---------------------------------------------------------------

    @property
    def current_streak(self) -> int:
        streak = 0
        for correct in reversed(self._correct_flags()):
            if not correct:
                break
            streak += 1
        return streak

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            state = {
                'id': self.id,
                'mode': self.mode.value,
                'status': self.status.value,
                'currentRound': self.current_round_index + 1,
                'totalRounds': self.total_rounds,
                'timeRemaining': self.time_remaining,
                'timeDisplay': scoring.format_time(self.time_remaining),
                'timeLimit': self.time_limit,
                'score': self.score,
                'hintsUsed': self.hints_used,
                'maxHints': self.max_hints,
                'hints': list(self.hints),
                'streak': self.current_streak,
                'history': [r.to_dict() for r in self.history],
                'lastOutcome': self.last_outcome.to_dict(),
                'won': self.won,
                'notifications': list(self.notifications),
                'summary': self.summary.to_payload() if self.summary else None,
            }
            if self.status == SessionStatus.ENDED and self.puzzle is not None:
                state['answer'] = self.puzzle.answer
            state.update(self._extra_state())
            return state


class AnagramSession(GameSession):
    """Unscramble one word per round; a timed-out round still moves on."""
    mode = GameMode.ANAGRAM

    def __init__(self, time_limit: int = 60, total_rounds: int = 5, max_hints: int = 3,
                 words: Optional[Sequence[str]] = None, **kwargs):
        self.words = [w.upper() for w in words] if words else None
        super().__init__(time_limit, total_rounds=total_rounds, max_hints=max_hints, **kwargs)

    def _pick_word(self) -> str:
        if self.words:
            return self.words[self.current_round_index % len(self.words)]
        length = word_length_for_difficulty(difficulty_for_score(self.score), self.rng)
        return random_word_by_length(length, self.rng)

    def _new_puzzle(self) -> Puzzle:
        return anagram_puzzle(self._pick_word(), self.rng)

    def _check_answer(self, answer: str) -> RoundOutcome:
        if answer != self.puzzle.answer:
            if is_valid_anagram_solution(self.puzzle.presented, answer):
                return RoundOutcome.incorrect('Right letters, different word')
            return RoundOutcome.incorrect('Try again!')
        elapsed = self.elapsed_seconds
        points = scoring.anagram_points(elapsed)
        self.score += points
        self.history.append(RoundResult(self.puzzle.answer, elapsed, points))
        outcome = RoundOutcome.correct(points, scoring.encouragement(points, self.current_streak))
        self._advance()
        return outcome

    def _on_timeout(self) -> None:
        self.history.append(RoundResult(self.puzzle.answer, self.time_limit, 0, OutcomeKind.TIMED_OUT))
        self._advance()

    def _summarize(self) -> GameSummary:
        solved = [r for r in self.history if r.outcome == OutcomeKind.CORRECT]
        average_ms = 0
        if solved:
            average_ms = scoring.round_half_up(sum(r.elapsed_seconds for r in solved) / len(solved) * 1000)
        return GameSummary(
            mode=self.mode,
            score=self.score,
            words_correct=len(solved),
            total_words=self.total_rounds,
            average_time_ms=average_ms,
            longest_streak=scoring.longest_streak(self._correct_flags()),
            detail={
                'rounds': [r.to_dict() for r in self.history],
                'totalRounds': self.total_rounds,
                'hintsUsed': self.hints_used,
            },
        )

    def _extra_state(self) -> Dict[str, Any]:
        if self.puzzle is None:
            return {'scrambled': None, 'wordLength': 0}
        return {'scrambled': self.puzzle.presented, 'wordLength': len(self.puzzle.answer)}


class WordLadderSession(GameSession):
    """Walk from the start word to the target one letter at a time.

    Every submission spends one attempt. Rejected words leave the chain as it
    was; running out of attempts or time loses the game.
    """
    mode = GameMode.WORD_LADDER

    def __init__(self, time_limit: int = 180, max_attempts: int = 10,
                 pair: Optional[Tuple[str, str]] = None, **kwargs):
        self.max_attempts = max_attempts
        self.pair = (pair[0].upper(), pair[1].upper()) if pair else None
        kwargs.setdefault('max_hints', 0)
        super().__init__(time_limit, total_rounds=1, **kwargs)

    def _clear(self) -> None:
        super()._clear()
        self.chain: List[str] = []
        self.attempts = 0
        self._accepted: List[bool] = []

    @property
    def start_word(self) -> Optional[str]:
        return self.puzzle.presented[0] if self.puzzle else None

    @property
    def target_word(self) -> Optional[str]:
        return self.puzzle.answer if self.puzzle else None

    @property
    def current_word(self) -> Optional[str]:
        return self.chain[-1] if self.chain else None

    def _new_puzzle(self) -> Puzzle:
        if self.pair:
            puzzle = Puzzle(answer=self.pair[1], presented=self.pair)
        else:
            puzzle = ladder_puzzle(self.rng)
        self.chain = [puzzle.presented[0]]
        return puzzle

    def _rejection(self, word: str) -> Optional[str]:
        current = self.current_word
        if len(word) != len(current):
            return f"Words must have {len(current)} letters"
        if word in self.chain:
            return f"{word} is already in the ladder"
        if sum(1 for a, b in zip(current, word) if a != b) != 1:
            return "Change exactly one letter"
        if word != self.target_word and not is_ladder_word(word):
            return f"{word} is not in the word list"
        return None

    def _check_answer(self, answer: str) -> Optional[RoundOutcome]:
        if not answer.isalpha():
            return None
        self.attempts += 1
        reason = self._rejection(answer)
        self._accepted.append(reason is None)
        if reason is not None:
            outcome = RoundOutcome.incorrect(reason)
            if self.attempts >= self.max_attempts:
                self._lose()
            return outcome

        self.chain.append(answer)
        if answer == self.target_word:
            self.won = True
            points = scoring.ladder_win_score(self.time_remaining, len(self.chain), self.max_attempts)
            self.score += points
            self.history.append(RoundResult(tuple(self.chain), self.elapsed_seconds, points))
            self._finish()
            return RoundOutcome.correct(points, 'You reached the target!')
        if self.attempts >= self.max_attempts:
            self._lose()
            return RoundOutcome.incorrect('Out of attempts')
        return RoundOutcome.pending(f"{answer} accepted")

    def _lose(self, outcome: OutcomeKind = OutcomeKind.INCORRECT) -> None:
        self.won = False
        self.history.append(RoundResult(tuple(self.chain), self.elapsed_seconds, 0, outcome))
        self._finish()

    def _on_timeout(self) -> None:
        self._lose(OutcomeKind.TIMED_OUT)

    def _correct_flags(self) -> List[bool]:
        return list(self._accepted)

    def _summarize(self) -> GameSummary:
        steps = len(self.chain) - 1
        average_ms = scoring.round_half_up(self.elapsed_seconds / steps * 1000) if steps > 0 else 0
        return GameSummary(
            mode=self.mode,
            score=self.score,
            words_correct=steps,
            total_words=self.attempts,
            average_time_ms=average_ms,
            longest_streak=scoring.longest_streak(self._accepted),
            won=bool(self.won),
            detail={
                'startWord': self.start_word,
                'targetWord': self.target_word,
                'wordChain': list(self.chain),
                'attempts': self.attempts,
                'maxAttempts': self.max_attempts,
                'won': bool(self.won),
            },
        )

    def _extra_state(self) -> Dict[str, Any]:
        return {
            'startWord': self.start_word,
            'targetWord': self.target_word,
            'currentWord': self.current_word,
            'wordChain': list(self.chain),
            'attempts': self.attempts,
            'maxAttempts': self.max_attempts,
        }


class SpeedTypeSession(GameSession):
    """Type as many valid words as possible before the clock runs out."""
    mode = GameMode.SPEED_TYPE

    def __init__(self, time_limit: int = 60, **kwargs):
        kwargs.setdefault('max_hints', 0)
        super().__init__(time_limit, total_rounds=1, **kwargs)

    def _clear(self) -> None:
        super()._clear()
        self.typed_words: List[str] = []
        self.total_characters = 0
        self.correct_characters = 0
        self.wpm = 0
        self.accuracy = 100
        self._valid: List[bool] = []

    def _new_puzzle(self) -> None:
        return None

    def submit_answer(self, text: Optional[str]) -> Optional[RoundOutcome]:
        # A space or enter delimits words, so one submission may hold several
        outcome = None
        for token in (text or '').split():
            outcome = super().submit_answer(token) or outcome
        return outcome

    def _check_answer(self, answer: str) -> RoundOutcome:
        self.total_characters += len(answer)
        valid = is_valid_word(answer) and answer not in self.typed_words
        self._valid.append(valid)
        if valid:
            points = scoring.speed_type_points(answer)
            self.typed_words.append(answer)
            self.correct_characters += len(answer)
            self.score += points
            self.history.append(RoundResult(answer, self.elapsed_seconds, points))
            outcome = RoundOutcome.correct(points)
        else:
            outcome = RoundOutcome.incorrect()
        self.wpm = scoring.words_per_minute(len(self.typed_words), self.elapsed_seconds)
        self.accuracy = scoring.accuracy(self.correct_characters, self.total_characters)
        return outcome

    def _on_timeout(self) -> None:
        self._finish()

    def _correct_flags(self) -> List[bool]:
        return list(self._valid)

    def _hint_for(self, index: int) -> Optional[str]:
        return None

    def _summarize(self) -> GameSummary:
        count = len(self.typed_words)
        average_ms = scoring.round_half_up(self.elapsed_seconds / count * 1000) if count else 0
        return GameSummary(
            mode=self.mode,
            score=self.score,
            words_correct=count,
            total_words=len(self._valid),
            average_time_ms=average_ms,
            longest_streak=scoring.longest_streak(self._valid),
            detail={
                'wordsTyped': list(self.typed_words),
                'wpm': self.wpm,
                'accuracy': self.accuracy,
                'totalCharacters': self.total_characters,
                'correctCharacters': self.correct_characters,
            },
        )

    def _extra_state(self) -> Dict[str, Any]:
        return {
            'wordsTyped': list(self.typed_words),
            'wpm': self.wpm,
            'accuracy': self.accuracy,
            'totalCharacters': self.total_characters,
            'correctCharacters': self.correct_characters,
        }


SESSION_CLASSES = {
    GameMode.ANAGRAM: AnagramSession,
    GameMode.WORD_LADDER: WordLadderSession,
    GameMode.SPEED_TYPE: SpeedTypeSession,
}
