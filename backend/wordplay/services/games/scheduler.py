import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RoundTimer:
    """Owned, cancellable once-per-interval tick source for one game session.

    Every ``start()`` opens a new generation and every ``cancel()`` closes the
    current one. A worker loop only delivers ticks while its own generation is
    current, so a sleep that straddles a cancel can never reach the session.

    ``spawn`` runs the worker loop in the background (normally
    ``socketio.start_background_task``). With ``spawn=None`` nothing runs on
    its own and ticks are delivered by calling ``fire()``.
    """

    def __init__(
        self,
        on_tick: Callable[[int], None],
        interval: float = 1.0,
        spawn: Optional[Callable] = None,
        sleep: Optional[Callable[[float], None]] = None,
        heartbeat: int = 0,
        label: str = '',
    ):
        self._on_tick = on_tick
        self.interval = interval
        self._spawn = spawn
        self._sleep = sleep or time.sleep
        self._heartbeat = heartbeat
        self.label = label
        self._lock = threading.Lock()
        self._generation = 0
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._armed and generation == self._generation

    def start(self) -> int:
        with self._lock:
            self._generation += 1
            self._armed = True
            generation = self._generation
        logger.info(f"[timer-set] {self.label} generation={generation} interval={self.interval}s")
        if self._spawn is not None:
            self._spawn(self._worker, generation)
        return generation

    def cancel(self) -> None:
        with self._lock:
            if not self._armed:
                return
            self._armed = False
            self._generation += 1
            generation = self._generation
        logger.info(f"[timer-cancel] {self.label} generation={generation - 1}")

    def fire(self, generation: Optional[int] = None) -> bool:
        """Deliver one tick for ``generation`` (default: the current one).

        Returns False without calling the session when the generation has been
        cancelled or superseded.
        """
        if generation is None:
            generation = self._generation
        if not self.is_current(generation):
            logger.info(f"[timer-abort] {self.label} stale generation={generation}")
            return False
        self._on_tick(generation)
        return True

    def _worker(self, generation: int) -> None:
        ticks = 0
        while self.is_current(generation):
            self._sleep(self.interval)
            if not self.fire(generation):
                return
            ticks += 1
            if self._heartbeat and ticks % self._heartbeat == 0:
                logger.info(f"[timer-heartbeat] {self.label} generation={generation} ticks={ticks}")
