"""Live game sessions for one Flask app.

The registry builds sessions from app config, runs their timers as Socket.IO
background tasks, pushes every state change to the session's room and hands
finished games to the stats aggregator without blocking play.
"""
import threading
import time
from typing import Dict, Optional

from wordplay import socketio
from wordplay.schemas import GameResultIn
from .session import GameMode, GameSession, GameSummary, SESSION_CLASSES
from .stats import submit_game_result


def session_room(session_id: str) -> str:
    return f"session:{session_id}"


class SessionRegistry:
    def __init__(self, app, clock=time.monotonic):
        self.app = app
        self.clock = clock
        self._sessions: Dict[str, GameSession] = {}
        # Last state change per session, used to evict abandoned games
        self._touched: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _timer_kwargs(self) -> dict:
        cfg = self.app.config
        run_timers = not cfg.get('TESTING') or cfg.get('ENABLE_SCHEDULER_IN_TESTS')
        return {
            'interval': float(cfg.get('TICK_INTERVAL_SEC', 1)),
            'spawn': socketio.start_background_task if run_timers else None,
            'sleep': socketio.sleep,
            'heartbeat': int(cfg.get('TIMER_HEARTBEAT_SEC', 0)),
        }

    def _mode_kwargs(self, mode: GameMode) -> dict:
        cfg = self.app.config
        if mode == GameMode.ANAGRAM:
            return {
                'time_limit': int(cfg.get('ANAGRAM_ROUND_SEC', 60)),
                'total_rounds': int(cfg.get('ANAGRAM_ROUNDS', 5)),
                'max_hints': int(cfg.get('ANAGRAM_MAX_HINTS', 3)),
            }
        if mode == GameMode.WORD_LADDER:
            return {
                'time_limit': int(cfg.get('LADDER_DURATION_SEC', 180)),
                'max_attempts': int(cfg.get('LADDER_MAX_ATTEMPTS', 10)),
            }
        return {'time_limit': int(cfg.get('SPEED_TYPE_DURATION_SEC', 60))}

    def create(self, mode: GameMode, user_id: Optional[int] = None, **overrides) -> GameSession:
        self.sweep()
        kwargs = self._mode_kwargs(mode)
        kwargs.update(self._timer_kwargs())
        kwargs.update(overrides)
        session = SESSION_CLASSES[mode](
            user_id=user_id,
            on_end=self._on_end,
            on_change=self._on_change,
            **kwargs,
        )
        with self._lock:
            self._sessions[session.id] = session
            self._touched[session.id] = self.clock()
        self.app.logger.info(f"[session-create] session={session.id} mode={mode.value} user={user_id}")
        return session

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
            self._touched.pop(session_id, None)
        if session is not None:
            session.cancel_pending_tick()
            self.app.logger.info(f"[session-discard] session={session_id}")

    def __len__(self) -> int:
        return len(self._sessions)

    def sweep(self) -> int:
        """Drop sessions with no state change for ``SESSION_TTL_SEC`` seconds.

        A running round changes state on every tick, so only finished, reset or
        abandoned games go stale.
        """
        ttl = float(self.app.config.get('SESSION_TTL_SEC', 300))
        cutoff = self.clock() - ttl
        with self._lock:
            stale = [sid for sid, touched in self._touched.items() if touched <= cutoff]
        for session_id in stale:
            self.discard(session_id)
        if stale:
            self.app.logger.info(f"[session-sweep] evicted={len(stale)} live={len(self)}")
        return len(stale)

    def _on_change(self, session: GameSession) -> None:
        with self._lock:
            if session.id in self._sessions:
                self._touched[session.id] = self.clock()
        socketio.emit('state_update', session.snapshot(), to=session_room(session.id), namespace='/ws')

    def _on_end(self, session: GameSession, summary: GameSummary) -> None:
        """Submit the result in the background; failures only produce a notice."""
        if session.user_id is None:
            return
        app = self.app
        payload = GameResultIn.model_validate(summary.to_payload())

        def _worker(user_id: int):
            with app.app_context():
                try:
                    record = submit_game_result(user_id, payload)
                except Exception:
                    app.logger.exception(f"[score-failed] session={session.id} user={user_id}")
                    session.notify('Score not saved')
                    socketio.emit(
                        'score_not_saved',
                        {'session_id': session.id, 'message': 'Score not saved'},
                        to=session_room(session.id),
                        namespace='/ws',
                    )
                    return
                app.logger.info(f"[score-saved] session={session.id} user={user_id} score_id={record.id} score={record.score}")

        if app.config.get('TESTING'):
            _worker(session.user_id)
        else:
            socketio.start_background_task(_worker, session.user_id)


def get_registry(app) -> SessionRegistry:
    registry = app.extensions.get('wordplay_sessions')
    if registry is None:
        registry = SessionRegistry(app)
        app.extensions['wordplay_sessions'] = registry
    return registry
