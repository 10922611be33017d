"""Schedulers used by the progression controller to arm question timers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock, Timer, current_thread
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerScheduler(Protocol):
    """Runs a callback once after a delay in seconds."""

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None: ...

    def shutdown(self) -> None:
        """Drop every timer that has not fired yet."""
        ...


class ThreadingTimerScheduler:
    """Fires callbacks from daemon ``threading.Timer`` threads."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._timers: set[Timer] = set()
        self._closed = False

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Scheduler closed; dropping timer for %.1fs", delay_seconds)
                return
            timer = Timer(delay_seconds, self._run, args=(callback,))
            timer.daemon = True
            self._timers.add(timer)
        timer.start()

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for timer in self._timers if timer.is_alive())

    def shutdown(self) -> None:
        """Cancel everything still waiting. Used when the server stops."""
        with self._lock:
            self._closed = True
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _run(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Quiz timer callback failed")
        finally:
            with self._lock:
                self._timers.discard(current_thread())
